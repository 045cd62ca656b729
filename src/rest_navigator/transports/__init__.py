"""Transports that carry endpoint requests over the network."""

from .http import HttpxTransport

__all__ = ["HttpxTransport"]
