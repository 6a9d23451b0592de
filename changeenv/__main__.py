"""Allow ``python -m changeenv``."""

from __future__ import annotations

from changeenv.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
