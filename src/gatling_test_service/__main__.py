"""Module entry point for `python -m gatling_test_service`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
