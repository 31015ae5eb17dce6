"""
HTTP Transport for JSON-RPC

POSTs JSON-RPC bodies to https://<hostname>/jsonrpc over a single
requests.Session. Connection failures are reported in the returned
TransportResponse rather than raised.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
import urllib3

from fortiapi.__version__ import __version__

JSONRPC_PATH = "/jsonrpc"


@dataclass
class TransportResponse:
    """Raw outcome of one POST"""
    code: int
    message: Optional[str]
    content: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.code <= 299


class JSONRPCTransport:
    """
    HTTP transport for one appliance.

    Not thread safe. In insecure mode certificate and hostname checks are
    disabled for every request made through this transport.
    """

    def __init__(
        self,
        hostname: str,
        secured: bool = True,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize transport.

        Args:
            hostname: Host name or IP address of the appliance
            secured: False disables TLS certificate/hostname verification
            timeout: Request timeout in seconds (None uses the requests default)
            session: Pre-built requests.Session, mainly for tests
        """
        self.hostname = hostname
        self.secured = secured
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': f'fortiapi/{__version__}'
        })

        if not secured:
            self.session.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            self.logger.warning(f"TLS verification disabled for {hostname}")

    @property
    def endpoint_url(self) -> str:
        return f"https://{self.hostname}{JSONRPC_PATH}"

    def post(self, body: Dict[str, Any]) -> TransportResponse:
        """
        Send one JSON-RPC body.

        Args:
            body: Outbound structure, serialized with sorted keys

        Returns:
            TransportResponse with the HTTP code, reason and body text.
            A request that never got a response has code -1.
        """
        self.logger.debug(f"HTTP POST {self.endpoint_url} id={body.get('id')}")

        try:
            response = self.session.post(
                self.endpoint_url,
                data=json.dumps(body, sort_keys=True),
                timeout=self.timeout,
                verify=self.secured
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Could not POST to {self.endpoint_url}: {e}")
            return TransportResponse(
                code=-1,
                message=f"Could not POST to {self.endpoint_url}: {e}"
            )

        self.logger.debug(f"HTTP response: {response.status_code} {response.reason}")
        return TransportResponse(
            code=response.status_code,
            message=response.reason,
            content=response.text
        )

    def close(self):
        """Close the HTTP session"""
        self.session.close()
