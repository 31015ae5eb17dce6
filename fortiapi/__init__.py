"""
fortiapi: FortiManager JSON-RPC client

A session-aware client for the FortiManager JSON API, with batched
request normalization and per-URL status aggregation.
"""

from .__version__ import __version__
from .config import ClientConfig
from .exceptions import FortiAPIError, ConfigurationError, SessionError
from .session import Client

__all__ = [
    '__version__',
    'Client',
    'ClientConfig',
    'FortiAPIError',
    'ConfigurationError',
    'SessionError',
    'communication',
    'core',
    'logging',
    'utils'
]
