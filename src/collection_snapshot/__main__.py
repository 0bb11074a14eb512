"""Module entry point for ``python -m collection_snapshot``."""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
