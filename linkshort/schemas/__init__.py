# re-export common schemas for simpler imports
from .URLCreateRequest import URLCreateRequest
from .ShortURLResponse import ShortURLResponse
from .URLMapping import URLMapping

__all__ = [
    "URLCreateRequest",
    "ShortURLResponse",
    "URLMapping",
]
