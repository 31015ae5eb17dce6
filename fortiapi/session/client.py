"""
FortiManager Client

Owns an authenticated session against one appliance. Construction either
yields a client with a verified live session or raises.

Usage:
    config = ClientConfig(hostname="fmg.example.com", username="admin", password=secret)

    with Client(config) as client:
        ok, result, status = client.call("get", "sys/status")

Leaving the with-block logs out, but only if this client performed the
login itself. A session supplied by the caller is left open.
"""

import logging
import re
from typing import Any, Dict, Optional

from fortiapi.communication.echo import Echo, EchoMode
from fortiapi.communication.http_client import JSONRPCTransport
from fortiapi.communication.message_format import CallResult, CallStatus
from fortiapi.config.client_config import ClientConfig
from fortiapi.core.engine import RequestEngine
from fortiapi.exceptions import ConfigurationError, SessionError

STATUS_URL = "sys/status"
LOGIN_URL = "sys/login/user"
LOGOUT_URL = "sys/logout"
WORKSPACE_URL = "pm/config/adom/{adom}/_workspace/{mode}"

WORKSPACE_MODES = ('lock', 'unlock', 'commit')
ADOM_PATTERN = re.compile(r'[a-zA-Z0-9_\-]*')


def _mask(token: Optional[str]) -> str:
    if not token:
        return "<none>"
    return token[:4] + "..." if len(token) > 8 else "***"


class Client:
    """
    Session-bound client for one FortiManager appliance.

    Not thread safe: the transaction id, last result and last status are
    shared by every call. Use one Client per concurrent caller.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport=None,
        echo: Optional[Echo] = None
    ):
        """
        Establish a session.

        An existing session token is probed first with a status query. If
        there is no token or the probe fails, a login is attempted with the
        configured username and password.

        Args:
            config: Connection settings
            transport: Object with post(body); a JSONRPCTransport is built
                       from config when omitted
            echo: Echo strategy for request/response mirroring

        Raises:
            ConfigurationError: If hostname or credentials are missing
            SessionError: If no valid session could be established
        """
        config.validate()

        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{config.hostname}")

        self._session = config.session
        self._secured = not config.insecure
        self._logged_in = False
        self._closed = False

        self.transport = transport or JSONRPCTransport(
            config.hostname,
            secured=self._secured,
            timeout=config.timeout
        )
        self.engine = RequestEngine(
            self.transport,
            echo=echo,
            verbose=config.verbose,
            default_echo=config.echo,
            transaction_id=config.transaction_id
        )

        try:
            self._establish_session()
        except SessionError:
            self.transport.close()
            raise

    def _housekeeping_echo(self) -> EchoMode:
        """Probe/login/logout calls are shown only for plain verbose mode"""
        if self.config.verbose and self.config.echo is EchoMode.UNSET:
            return EchoMode.UNSET
        return EchoMode.NONE

    def _establish_session(self):
        ok = None

        if self._session is not None:
            self.logger.debug(f"Probing existing session {_mask(self._session)}")
            ok = self.call('get', STATUS_URL, echo=self._housekeeping_echo()).ok

            if not ok:
                self.logger.info(f"Session {_mask(self._session)} is stale: {self.status.error_message}")

        if not ok and self.config.has_credentials:
            self.logger.info(f"Logging in to {self.hostname} as {self.config.username}")
            ok = self._login()

        if self._session is None or not ok:
            raise SessionError(self.status.error_message)

        self.logger.info(f"Session established on {self.hostname}")

    def _login(self) -> bool:
        # Log in without a session attached
        self._session = None
        result = self.engine.call(
            'exec',
            url=LOGIN_URL,
            data={'user': self.config.username, 'passwd': self.config.password},
            echo=self._housekeeping_echo()
        )

        session = result.result.get('session')
        self._session = session if isinstance(session, str) and session else None
        self._logged_in = True

        return result.ok

    # Accessors

    @property
    def hostname(self) -> str:
        return self.config.hostname

    @property
    def session(self) -> Optional[str]:
        return self._session

    @property
    def secured(self) -> bool:
        return self._secured

    @property
    def logged_in(self) -> bool:
        """True if this client performed the login (and so owns the logout)"""
        return self._logged_in

    @property
    def transaction_id(self) -> int:
        """Id the next call will use"""
        return self.engine.transaction_id

    @property
    def result(self) -> Dict[str, Any]:
        """Decoded payload of the last call"""
        return self.engine.result

    @property
    def status(self) -> CallStatus:
        """Status of the last call"""
        return self.engine.status

    # Operations

    def call(self, method, url=None, data=None, params=None, echo=None) -> CallResult:
        """
        Send a call with the current session attached.

        See RequestEngine.call for the argument shapes.

        Returns:
            CallResult(ok, result, status)
        """
        if self._closed:
            raise SessionError("Client is closed")

        return self.engine.call(
            method,
            url=url,
            data=data,
            params=params,
            echo=echo,
            session=self._session
        )

    def workspace(self, adom: str, mode: str, echo=EchoMode.NONE) -> bool:
        """
        Lock, commit or unlock the workspace of an ADOM.

        Args:
            adom: ADOM name (letters, digits, underscore and hyphen only)
            mode: 'lock', 'unlock' or 'commit' (case-insensitive)
            echo: Echo override (default: none)

        Returns:
            True on success

        Raises:
            ConfigurationError: On an invalid mode or ADOM name
        """
        if not isinstance(mode, str) or mode.lower() not in WORKSPACE_MODES:
            raise ConfigurationError("Invalid mode supplied")

        if not isinstance(adom, str) or not ADOM_PATTERN.fullmatch(adom):
            raise ConfigurationError("ADOM invalid or missing")

        url = WORKSPACE_URL.format(adom=adom, mode=mode.lower())
        return self.call('exec', url, echo=echo).ok

    def close(self):
        """
        Log out (if this client logged in) and release the transport.

        Logout is best effort: failures are logged, never raised. Safe to
        call more than once.
        """
        if self._closed:
            return

        try:
            if self._logged_in and self._session is not None:
                self.logger.info(f"Logging out of {self.hostname}")
                result = self.call('exec', LOGOUT_URL, echo=self._housekeeping_echo())
                if not result.ok:
                    self.logger.warning(f"Logout failed: {result.status.error_message}")
        except Exception as e:
            self.logger.warning(f"Logout failed: {e}")
        finally:
            self._closed = True
            self.transport.close()

    def __enter__(self) -> 'Client':
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"Client(hostname={self.hostname!r}, session={_mask(self._session)}, "
            f"transaction_id={self.transaction_id}, secured={self.secured})"
        )
