"""
Library Catalog backend
GraphQL catalog of authors and books with token auth and live notifications
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
