"""Module entrypoint for ``python -m brnch`` (same as the ``brnch`` console script)."""

from __future__ import annotations

from .cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
