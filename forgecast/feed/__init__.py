"""
Feed Layer.

iTunes namespace extension applied to RSS channels and items.
"""

from .extension import ITUNES_NS, PodcastExtension

__all__ = ["ITUNES_NS", "PodcastExtension"]
