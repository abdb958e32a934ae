"""Command-line scripts, run with `python -m loadboard.scripts.<name>`."""
