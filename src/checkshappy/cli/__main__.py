"""Main entry point for checkshappy CLI when run as a module."""

from checkshappy.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
