"""
policygen CLI entry point.
"""
import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from policygen import __version__
from policygen.config import load_settings
from policygen.errors import ConfigurationError, PolicygenError
from policygen.extract import extract, validate_inputs
from policygen.models.resource import Resource
from policygen.reporters import json_reporter

_SOURCE_COLORS = {
    "plan": "cyan",
    "state": "green",
}


def _print_resource_table(resources: List[Resource], no_color: bool) -> None:
    """Print a rich table of extracted resources to stderr."""
    tbl = Table(title="Terraform Resources", show_header=True, header_style="bold")
    tbl.add_column("#", style="dim", width=4)
    tbl.add_column("Address")
    tbl.add_column("Type")
    tbl.add_column("Source", width=6)
    tbl.add_column("Attributes", justify="right")

    for i, r in enumerate(resources, 1):
        color = _SOURCE_COLORS.get(r.source.value, "") if not no_color else ""
        tbl.add_row(
            str(i),
            r.qualified_name,
            r.resource_type,
            f"[{color}]{r.source.value}[/{color}]" if color else r.source.value,
            str(len(r.attributes)),
        )

    Console(stderr=True, no_color=no_color).print(tbl)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.option(
    "--input_dir",
    default="",
    help="Path to Terraform configs root directory. Cannot be specified together with other types of inputs.",
)
@click.option(
    "--input_plan",
    default="",
    help="Path to Terraform plan in json format. Cannot be specified together with other types of inputs.",
)
@click.option(
    "--input_state",
    default="",
    help="Path to Terraform state in json format. Cannot be specified together with other types of inputs.",
)
@click.option(
    "--output_dir",
    default="",
    help="Path to directory to write generated policies.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(),
    default=None,
    help="Settings file (default: ./policygen.yaml when present).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="How to print extracted resources.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)
def cli(
    input_dir: str,
    input_plan: str,
    input_state: str,
    output_dir: str,
    config_path: Optional[str],
    output_format: str,
    no_color: bool,
) -> None:
    """
    Extract resources from Terraform configs, a plan or a state file
    as input for policy generation.
    """
    stderr = Console(stderr=True, no_color=no_color)

    # 1. Input contract, before any filesystem or Terraform access
    try:
        validate_inputs(input_dir, input_plan, input_state, output_dir)
        settings = load_settings(config_path)
    except ConfigurationError as exc:
        stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(2)

    # 2. Extract
    with stderr.status("[bold]Extracting resources…"):
        try:
            result = extract(
                input_dir=input_dir,
                input_plan=input_plan,
                input_state=input_state,
                output_dir=output_dir,
                settings=settings,
                console=stderr,
            )
        except PolicygenError as exc:
            stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
            sys.exit(1)

    stderr.print(f"Found [bold]{len(result.resources)}[/bold] resources.")

    # 3. Report
    if output_format.lower() == "json":
        click.echo(json_reporter.build_report(result.resources, input_dir or input_plan or input_state))
    else:
        _print_resource_table(result.resources, no_color)

    # TODO: generate policies into result.output_dir once the generator exists.
    sys.exit(0)


def main():
    cli()


if __name__ == "__main__":
    main()
