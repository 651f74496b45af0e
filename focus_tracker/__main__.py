from __future__ import annotations

from focus_tracker.main import main

if __name__ == "__main__":
    raise SystemExit(main())
