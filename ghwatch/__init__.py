"""Repository activity notifications for GitHub.

``ghwatch`` polls a repository's public event feed, describes each event as a
one-line notification, and remembers how far it has read so repeated runs
only surface new activity.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
