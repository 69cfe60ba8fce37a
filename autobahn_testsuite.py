#!/usr/bin/env python3
"""Drop-in replacement for the autobahn-testsuite.sh helper."""

from __future__ import annotations

from main import main


if __name__ == "__main__":
    raise SystemExit(main())
