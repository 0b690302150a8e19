"""
simpsh Filesystem Module

Search path resolution for bare command names.
"""

from .path_resolver import PathResolver

__all__ = [
    'PathResolver',
]
