"""Allow running as ``python -m sirecoder``."""

from sirecoder.cli import app

app()
