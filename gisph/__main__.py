"""Allow running the CLI as ``python -m gisph``."""

from gisph.cli.app import main

if __name__ == "__main__":
    main()
