"""
Main entry point for the qara CLI.

This module is executed when running `python -m qara` or via the `qara` executable.
"""

from .cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
