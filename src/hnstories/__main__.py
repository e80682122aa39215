"""Allow ``python -m hnstories``."""

from hnstories.cli import cli

if __name__ == "__main__":
    cli()
