"""Allow running with ``python -m cli_web_search``."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
