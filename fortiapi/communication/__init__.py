"""
fortiapi Communication Module

Provides the JSON-RPC message format, HTTP transport and echo strategies.
"""

from .message_format import Method, Status, CallStatus, CallResult, Target, Call
from .http_client import JSONRPCTransport, TransportResponse
from .echo import EchoMode, Echo, NullEcho, StreamEcho

__all__ = [
    'Method',
    'Status',
    'CallStatus',
    'CallResult',
    'Target',
    'Call',
    'JSONRPCTransport',
    'TransportResponse',
    'EchoMode',
    'Echo',
    'NullEcho',
    'StreamEcho'
]
