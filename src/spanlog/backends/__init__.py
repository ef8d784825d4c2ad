"""Backends: where records go once a logger has built them."""

from .console import ConsoleLogger, as_writer
from .remote import DeliveryPolicy, HttpTarget, HttpTransport, RemoteBuffer, RemoteLogger
from .transport import HttpxTransport

__all__ = [
    # Console
    "ConsoleLogger",
    "as_writer",
    # Remote
    "DeliveryPolicy",
    "HttpTarget",
    "HttpTransport",
    "HttpxTransport",
    "RemoteBuffer",
    "RemoteLogger",
]
