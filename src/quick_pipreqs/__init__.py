"""quick-pipreqs - regenerate requirements.txt files across a directory tree."""

from quick_pipreqs.version import FULL as __version__

__all__ = ["__version__"]
