"""Module entrypoint for ``python -m dirpane``."""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
