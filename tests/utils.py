import os

from policygen.errors import ExecutionError

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")

with open(os.path.join(FIXTURES, "plan.json"), "rb") as _fh:
    PLAN_JSON = _fh.read()


class FakeRunner:
    """Records commands and imitates Terraform writing into its working dir."""

    def __init__(self, fail_on=None, show_output=PLAN_JSON):
        self.calls = []
        self.fail_on = fail_on
        self.show_output = show_output

    def _exec(self, args, cwd):
        self.calls.append((list(args), cwd, sorted(os.listdir(cwd))))
        if args[1] == self.fail_on:
            raise ExecutionError(args, 1, stderr=b"boom")
        if args[1] == "init":
            os.makedirs(os.path.join(cwd, ".terraform"))
            with open(os.path.join(cwd, ".terraform.lock.hcl"), "w") as fh:
                fh.write("# lock\n")
        elif args[1] == "plan":
            with open(args[args.index("-out") + 1], "wb") as fh:
                fh.write(b"binary plan")

    def run(self, args, cwd=None):
        self._exec(args, cwd)

    def output(self, args, cwd=None):
        self._exec(args, cwd)
        return self.show_output
