"""Allow running as ``python -m bigfiles``."""

from bigfiles.cli import app

app(prog_name="list-big-files")
