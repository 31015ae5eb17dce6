"""
Shared fixtures: a scripted transport that records every outbound body.
"""

import copy
import json

import pytest

from fortiapi.communication.echo import NullEcho
from fortiapi.communication.http_client import TransportResponse
from fortiapi.config import ClientConfig


def status_result(url, code=0, message="OK", **extra):
    """One element of a response 'result' list"""
    element = {"url": url, "status": {"code": code, "message": message}}
    element.update(extra)
    return element


def json_response(result, session=None, request_id=1, code=200, reason="OK"):
    payload = {"id": request_id, "result": result}
    if session is not None:
        payload["session"] = session
    return TransportResponse(code=code, message=reason, content=json.dumps(payload))


class FakeTransport:
    """
    Stand-in for JSONRPCTransport.

    Queued responses are returned in order. A queued callable is called
    with the outbound body. With nothing queued, every call succeeds.
    """

    endpoint_url = "https://fmg.test/jsonrpc"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.bodies = []
        self.closed = False

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def post(self, body):
        self.bodies.append(copy.deepcopy(body))

        if not self.responses:
            urls = [p.get('url') for p in body['params']]
            return json_response([status_result(url) for url in urls], request_id=body['id'])

        response = self.responses.pop(0)
        if callable(response):
            response = response(body)
        return response

    def close(self):
        self.closed = True

    @property
    def methods(self):
        return [(b['method'], b['params'][0].get('url')) for b in self.bodies]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def null_echo():
    return NullEcho()


@pytest.fixture
def session_config():
    """Config with an existing session only"""
    return ClientConfig(hostname="fmg.test", session="existing-session")


@pytest.fixture
def login_config():
    """Config with credentials only"""
    return ClientConfig(hostname="fmg.test", username="admin", password="secret")
