"""Entry point for ``python -m agentic_guard``."""
from __future__ import annotations

from agentic_guard.cli import main

if __name__ == "__main__":
    main()
