"""
Request Engine

Turns a logical call into one batched JSON-RPC request, sends it through
the transport, and reduces the response into an aggregate status plus a
per-URL detail vector.

Design notes:
- The engine does not own a session. The token is passed into each call,
  so session validation and login go through the same path as any other
  request.
- Not thread safe. The transaction id, last result and last status are
  mutated in place on every call. Use one engine per concurrent caller.
- No retries. A failed call is reported once through its return value.
"""

import json
import logging
from typing import Any, Dict, Optional

from fortiapi.communication.echo import Echo, EchoMode, StreamEcho
from fortiapi.communication.message_format import (
    Call, CallResult, CallStatus, Status, missing_status
)
from fortiapi.core.subset import subset


def reduce_response(call: Call, payload: Dict[str, Any], status: CallStatus) -> CallStatus:
    """
    Fill the aggregate status of a decoded response.

    Args:
        call: The call the response answers; used for lookup keys
        payload: Decoded response body
        status: Status to update in place (http already set)

    Returns:
        The updated status
    """
    results = payload.get('result')

    if isinstance(results, list) and len(results) > 1:
        errors = 0
        status.detail = []
        status.vector = {}

        for index, element in enumerate(results):
            element = element if isinstance(element, dict) else {}
            element_status = (
                Status.from_dict(element['status'])
                if element.get('status') is not None else missing_status()
            )
            status.detail.append(element_status)
            status.vector[call.lookup_key(index, element.get('url'))] = index

            if not element_status.ok:
                errors += 1

        status.code = 0 if errors == 0 else -1
        if errors == 0:
            status.message = "All URLs were processed successfully"
        elif errors == 1:
            status.message = "1 URL returned an error"
        else:
            status.message = f"{errors} URLs returned errors"
        return status

    aggregate = Status.from_dict(
        subset(payload, 'result', 'status', default=missing_status().to_dict())
    )
    status.code = aggregate.code
    status.message = aggregate.message
    return status


class RequestEngine:
    """
    Sends calls to one appliance and keeps the outcome of the last one.

    Attributes:
        transaction_id: Id the next call will use
        result: Decoded payload of the last call ({} on failure)
        status: CallStatus of the last call
    """

    def __init__(
        self,
        transport,
        echo: Optional[Echo] = None,
        verbose: bool = False,
        default_echo: EchoMode = EchoMode.UNSET,
        transaction_id: int = 1
    ):
        """
        Initialize engine.

        Args:
            transport: Object with post(body) -> TransportResponse
            echo: Echo strategy (StreamEcho on stdout if omitted)
            verbose: Echo both directions when a call's echo mode is unset
            default_echo: Echo mode used when a call does not pass one
            transaction_id: First transaction id
        """
        self.transport = transport
        self.echo = echo if echo is not None else StreamEcho()
        self.verbose = verbose
        self.default_echo = EchoMode.parse(default_echo)
        self.transaction_id = int(transaction_id)

        self.result: Dict[str, Any] = {}
        self.status = CallStatus()

        self.logger = logging.getLogger(__name__)

    @property
    def endpoint_url(self) -> str:
        return getattr(self.transport, 'endpoint_url', 'the JSON-RPC endpoint')

    def call(
        self,
        method,
        url=None,
        data=None,
        params=None,
        echo=None,
        session: Optional[str] = None
    ) -> CallResult:
        """
        Send one call.

        Args:
            method: get, set, add, update, delete, exec, move, clone or replace
            url: URL, or list of URLs for a batched call
            data: Data payload, or list of payloads matching url/params
            params: Param object, or list of param objects; url and data are
                    written on top of them
            echo: Echo override for this call (EchoMode or its name)
            session: Session token to attach

        Returns:
            CallResult(ok, result, status)

        Raises:
            ConfigurationError: If the arguments are inconsistent; nothing
                                is sent and the transaction id is unchanged
        """
        mode = EchoMode.parse(echo) if echo is not None else self.default_echo
        call = Call.build(method, url=url, data=data, params=params)

        self.result = {}
        self.status = CallStatus(
            code=-1,
            message=None,
            http=Status(code=-1, message=f"Could not POST to {self.endpoint_url}")
        )

        request_id = self.transaction_id
        self.transaction_id += 1

        body = call.to_request(request_id, session)
        self.logger.debug(
            f"Call {call.method.value} id={request_id} targets={len(call.targets)}"
        )

        if mode.shows_request(self.verbose):
            self.echo.request(body, mode.shows_header)

        response = self.transport.post(body)
        self.status.http = Status(
            code=response.code,
            message=response.message or self.status.http.message
        )

        if not response.ok:
            self.status.message = self.status.http.message
            self.logger.warning(
                f"Call id={request_id} failed at transport level: "
                f"{self.status.http.code} {self.status.http.message}"
            )
            return CallResult(False, self.result, self.status)

        try:
            payload = json.loads(response.content)
        except (TypeError, ValueError):
            payload = None

        if not isinstance(payload, dict):
            self.status.message = "Invalid JSON"
            self.logger.warning(f"Call id={request_id} returned a malformed body")
            return CallResult(False, self.result, self.status)

        self.result = payload

        if mode.shows_response(self.verbose):
            self.echo.response(payload, mode.shows_header)

        reduce_response(call, payload, self.status)

        if not self.status.ok:
            self.logger.warning(
                f"Call id={request_id} returned {self.status.code}: {self.status.message}"
            )

        return CallResult(self.status.ok, self.result, self.status)
