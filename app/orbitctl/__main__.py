"""Allow ``python -m orbitctl``."""

from orbitctl.cli.main import app

app(prog_name="orbitctl")
