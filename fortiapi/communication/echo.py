"""
Request/Response Echo

Mirrors outbound and inbound JSON structures to a diagnostic stream.
Echo has no effect on return values; NullEcho turns it off entirely.
"""

from enum import Enum
from typing import Any, Optional, TextIO
import json
import sys

from fortiapi.exceptions import ConfigurationError


class EchoMode(Enum):
    """Per-call echo override"""
    ALL = "all"
    REQUEST = "request"
    RESPONSE = "response"
    NONE = "none"
    UNSET = "unset"

    @classmethod
    def parse(cls, value) -> 'EchoMode':
        if value is None:
            return cls.UNSET
        if isinstance(value, cls):
            return value
        mode = str(value).lower()
        # 'result' and 'off' are accepted spellings from older tooling
        mode = {'result': 'response', 'off': 'none'}.get(mode, mode)
        try:
            return cls(mode)
        except ValueError:
            raise ConfigurationError(
                f"Invalid echo mode '{value}'. Valid modes: {[m.value for m in cls]}"
            ) from None

    def shows_request(self, verbose: bool) -> bool:
        return (verbose and self is EchoMode.UNSET) or self in (EchoMode.REQUEST, EchoMode.ALL)

    def shows_response(self, verbose: bool) -> bool:
        return (verbose and self is EchoMode.UNSET) or self in (EchoMode.RESPONSE, EchoMode.ALL)

    @property
    def shows_header(self) -> bool:
        return self in (EchoMode.UNSET, EchoMode.ALL)


class Echo:
    """Echo strategy interface"""

    def request(self, body: Any, header: bool):
        """Mirror an outbound body"""

    def response(self, body: Any, header: bool):
        """Mirror an inbound body"""


class NullEcho(Echo):
    """Discards everything"""


class StreamEcho(Echo):
    """Writes pretty, key-sorted JSON to a text stream (stdout by default)"""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def request(self, body: Any, header: bool):
        self._write("# Request:", body, header)

    def response(self, body: Any, header: bool):
        self._write("# Response:", body, header)

    def _write(self, title: str, body: Any, header: bool):
        if header:
            self.stream.write(title + "\n")
        self.stream.write(pretty_json(body) + "\n")
        self.stream.flush()


def pretty_json(body: Any) -> str:
    return json.dumps(body, indent=3, sort_keys=True, default=str)
