"""Payment listener exceptions."""


class ListenerError(Exception):
    """Base class for payment listener errors."""


class ConnectivityLostError(ListenerError):
    """Raised inside the listener loop when the XRPL connection drops or cannot be opened."""
