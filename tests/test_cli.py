import io
import json
import os
import shutil
import subprocess
import sys

from click.testing import CliRunner
from rich.console import Console

from policygen import workspace
from policygen.cli import cli
from utils import FakeRunner

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def test_module_execution():
    """Test that 'python -m policygen' works."""
    result = subprocess.run(
        [sys.executable, "-m", "policygen", "--help"],
        capture_output=True,
        text=True
    )
    assert result.returncode == 0
    assert "--input_dir" in result.stdout


class TestCli:
    def setup_method(self):
        self.runner = CliRunner()

    def test_no_input(self, tmp_path):
        result = self.runner.invoke(cli, ["--output_dir", str(tmp_path)])
        assert result.exit_code == 2
        assert "exactly one of" in result.output

    def test_two_inputs(self, tmp_path):
        result = self.runner.invoke(cli, [
            "--input_plan", os.path.join(FIXTURES, "plan.json"),
            "--input_state", os.path.join(FIXTURES, "state.json"),
            "--output_dir", str(tmp_path),
        ])
        assert result.exit_code == 2

    def test_output_dir_required(self):
        result = self.runner.invoke(cli, ["--input_plan", os.path.join(FIXTURES, "plan.json")])
        assert result.exit_code == 2
        assert "--output_dir must be set" in result.output

    def test_plan_table(self, tmp_path):
        result = self.runner.invoke(cli, [
            "--input_plan", os.path.join(FIXTURES, "plan.json"),
            "--output_dir", str(tmp_path / "out"),
            "--no-color",
        ])
        assert result.exit_code == 0
        assert "Found 3 resources." in result.output
        assert "Terraform Resources" in result.output
        assert not (tmp_path / "out").exists()

    def test_state_json(self, tmp_path):
        result = self.runner.invoke(cli, [
            f"--input_state={os.path.join(FIXTURES, 'state.json')}",
            f"--output_dir={tmp_path}",
            "--format", "json",
        ])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["summary"]["total"] == 3
        assert report["summary"]["by_source"] == {"state": 3}
        assert [r["address"] for r in report["resources"]][0] == "google_storage_bucket.logs"

    def test_plan_json_unknown_rendered(self, tmp_path):
        result = self.runner.invoke(cli, [
            "--input_plan", os.path.join(FIXTURES, "plan.json"),
            "--output_dir", str(tmp_path),
            "--format", "json",
        ])
        assert result.exit_code == 0
        logs = json.loads(result.stdout)["resources"][0]
        assert logs["attributes"]["id"] == "(known after apply)"
        assert logs["source"] == "plan"

    def test_malformed_state(self, tmp_path):
        bad = tmp_path / "state.json"
        bad.write_text('{"values": ')
        result = self.runner.invoke(cli, ["--input_state", str(bad), "--output_dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "read resources from state" in result.output

    def test_bad_config(self, tmp_path):
        result = self.runner.invoke(cli, [
            "--input_plan", os.path.join(FIXTURES, "plan.json"),
            "--output_dir", str(tmp_path),
            "--config", str(tmp_path / "missing.yaml"),
        ])
        assert result.exit_code == 2

    def test_dir_commands_use_cli_console(self, tmp_path, monkeypatch):
        src = tmp_path / "configs"
        shutil.copytree(os.path.join(FIXTURES, "configs"), src)
        fallback = io.StringIO()
        monkeypatch.setattr(workspace, "default_console", Console(file=fallback))
        monkeypatch.setattr(workspace, "DefaultRunner", FakeRunner)
        result = self.runner.invoke(cli, [
            "--input_dir", str(src),
            "--output_dir", str(tmp_path / "out"),
            "--no-color",
        ])
        assert result.exit_code == 0
        assert "$ terraform init" in result.output
        assert fallback.getvalue() == ""
