"""Exports for payment quotes and the strategy catalog"""

from .exceptions import (
    InvalidQuoteRequestError,
    OperatorNotConfiguredError,
    QuoteError,
    StrategyNotFoundError,
)
from .models import FeeEstimate, Quote, Strategy, StrategySummary
from .service import QuoteService, StrategyCatalog

__all__ = [
    "FeeEstimate",
    "Quote",
    "QuoteService",
    "Strategy",
    "StrategyCatalog",
    "StrategySummary",
    "QuoteError",
    "InvalidQuoteRequestError",
    "OperatorNotConfiguredError",
    "StrategyNotFoundError",
]
