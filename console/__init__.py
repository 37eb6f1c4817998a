"""
Server-rendered admin console.
"""

from console.app import __version__, create_app

__all__ = [
    "__version__",
    "create_app",
]
