"""Entry point for ``python -m workout_tracker``."""

from __future__ import annotations

from workout_tracker.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
