"""Dictionary Exchange - bulk CSV export and import of dictionary translations."""

from .cli import app
from .config import ExchangeConfig
from .service import DictionaryExchangeService

__version__ = "0.1.0"
__all__ = ["app", "ExchangeConfig", "DictionaryExchangeService"]
