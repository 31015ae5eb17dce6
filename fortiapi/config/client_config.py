"""
Client Configuration

Everything a Client needs, assembled once by the caller. The library never
reads environment variables itself; the CLI tools resolve those into a
ClientConfig.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from fortiapi.communication.echo import EchoMode
from fortiapi.exceptions import ConfigurationError


@dataclass
class ClientConfig:
    """Connection and behaviour settings for one appliance"""
    hostname: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    session: Optional[str] = None
    insecure: bool = False
    verbose: bool = False
    echo: EchoMode = EchoMode.UNSET
    transaction_id: int = 1
    timeout: Optional[float] = None

    def __post_init__(self):
        self.echo = EchoMode.parse(self.echo)
        try:
            self.transaction_id = int(self.transaction_id)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Transaction ID must be an integer, got {self.transaction_id!r}"
            ) from None

    @property
    def has_credentials(self) -> bool:
        return self.username is not None and self.password is not None

    def validate(self):
        """
        Check that a session can be attempted at all.

        Raises:
            ConfigurationError: Without a hostname, or without both a
                                username/password pair and a session
        """
        if not self.hostname or (not self.has_credentials and self.session is None):
            raise ConfigurationError(
                "Hostname and either username and password or session ID are required"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'ClientConfig':
        """Build from a mapping, ignoring unknown keys and None values"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known and v is not None})

    def __repr__(self) -> str:
        return (
            f"ClientConfig(hostname={self.hostname!r}, username={self.username!r}, "
            f"password={'***' if self.password else None}, "
            f"session={'***' if self.session else None}, insecure={self.insecure}, "
            f"verbose={self.verbose}, echo={self.echo.value}, "
            f"transaction_id={self.transaction_id}, timeout={self.timeout})"
        )
