"""
Module entry-point that makes the package runnable with

    python -m bidsubset

The behaviour is identical to the *bidsubset-cli* console script.
"""

from bidsubset.cli import cli

if __name__ == "__main__":  # pragma: no cover
    cli()
