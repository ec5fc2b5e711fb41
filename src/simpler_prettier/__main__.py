"""CLI entry point for simpler-prettier."""

import sys


def main() -> int:
    """Main entry point for the simpler-prettier CLI."""
    from simpler_prettier.cli import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
