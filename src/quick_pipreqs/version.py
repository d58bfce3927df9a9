"""Version stamp for quick-pipreqs.

Format is ``major.minor.YYYYMMDD``; the date part is bumped on every release.
"""

from __future__ import annotations

MAJOR = 1
MINOR = 3
PATCH_DATE = "20250916"  # YYYYMMDD

FULL = f"{MAJOR}.{MINOR}.{PATCH_DATE}"
