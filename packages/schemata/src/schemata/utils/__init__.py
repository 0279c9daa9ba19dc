from .imports import import_string
from .proxy import Proxy

__all__ = ["Proxy", "import_string"]
