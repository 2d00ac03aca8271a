from .decorator import cached, invalidate_cache, with_cache
from .store import FileCache, get_cache

__all__ = [
    "FileCache",
    "cached",
    "get_cache",
    "invalidate_cache",
    "with_cache",
]
