"""Exports for the XRPL payment listener"""

from .exceptions import ConnectivityLostError, ListenerError
from .service import PaymentListener

__all__ = [
    "ConnectivityLostError",
    "ListenerError",
    "PaymentListener",
]
