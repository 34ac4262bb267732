from __future__ import annotations

from car_diagnostics.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
