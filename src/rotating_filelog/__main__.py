"""Module entrypoint.

Allows:
    python -m rotating_filelog
"""

from __future__ import annotations

from rotating_filelog.cli import main

if __name__ == "__main__":
    main()
