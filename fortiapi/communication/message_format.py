"""
fortiapi Message Format

Defines the JSON-RPC request structures sent to the appliance and the
status structures decoded from its responses.

Outbound:  {"method": str, "params": [{url?, data?: [payload], ...}], "id": int, "session"?: str}
Inbound:   {"id": int, "result": {...} | [{...}], "session"?: str}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional
import copy

from fortiapi.exceptions import ConfigurationError


class Method(Enum):
    """JSON-RPC methods understood by the appliance"""
    GET = "get"
    SET = "set"
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    EXEC = "exec"
    MOVE = "move"
    CLONE = "clone"
    REPLACE = "replace"

    @classmethod
    def parse(cls, value) -> 'Method':
        """Case-insensitive lookup; accepts an existing Method unchanged"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value:
            raise ConfigurationError("Method and URL or parameter block are required")
        try:
            return cls(value.lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown method '{value}'. "
                f"Known methods: {[m.value for m in cls]}"
            ) from None

    @property
    def names_objects(self) -> bool:
        """Whether per-URL lookup keys carry the object name for this method"""
        return self in (Method.ADD, Method.SET)


@dataclass
class Status:
    """A (code, message) pair. Code 0 is success."""
    code: int = -1
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == 0

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> 'Status':
        """Build from a response 'status' block, tolerating odd shapes"""
        if not isinstance(data, dict):
            return missing_status()
        code = data.get("code")
        # Integers and integer strings only; anything else is a failure
        if isinstance(code, bool) or not isinstance(code, (int, str)):
            code = -1
        else:
            try:
                code = int(code)
            except ValueError:
                code = -1
        return cls(code=code, message=data.get("message"))


def missing_status() -> Status:
    return Status(code=-1, message="No status available")


@dataclass
class CallStatus:
    """
    Outcome of one Call.

    code/message form the aggregate status. For batched responses,
    detail holds one Status per target in response order and vector maps
    '<url>[/<name-or-[index]>]' to the position in detail. http is the
    transport-level status.
    """
    code: int = -1
    message: Optional[str] = None
    http: Status = field(default_factory=Status)
    detail: List[Status] = field(default_factory=list)
    vector: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def error_message(self) -> str:
        """Most specific message available, for reporting failures"""
        return self.message or self.http.message or "Catastrophic malfunction"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code,
            "message": self.message,
            "http": self.http.to_dict()
        }
        if self.detail:
            result["detail"] = [s.to_dict() for s in self.detail]
            result["vector"] = dict(self.vector)
        return result


class CallResult(NamedTuple):
    """Return value of a call: success flag, decoded payload, status"""
    ok: bool
    result: Dict[str, Any]
    status: CallStatus


@dataclass
class Target:
    """One (url, data) unit of a Call, optionally on top of a raw param object"""
    url: Optional[str] = None
    data: Any = None
    params: Optional[Dict[str, Any]] = None
    has_data: bool = False

    def to_param(self) -> Dict[str, Any]:
        """Merge url and data into a copy of the param object"""
        param = copy.deepcopy(self.params) if self.params is not None else {}
        if self.url is not None:
            param['url'] = self.url
        if self.has_data:
            param['data'] = [self.data]
        return param

    @property
    def object_name(self) -> Optional[str]:
        if isinstance(self.data, dict):
            return self.data.get('name')
        return None


@dataclass
class Call:
    """
    One logical invocation: a method and one or more Targets.

    Build instances through Call.build(), which validates the shape of the
    url/data/params arguments before anything reaches the wire.
    """
    method: Method
    targets: List[Target]
    batched: bool = False

    @classmethod
    def build(cls, method, url=None, data=None, params=None) -> 'Call':
        """
        Normalize url/data/params into a list of Targets.

        Each argument may be a single value or a list. If any argument is a
        list, every supplied argument must be a list of the same length.

        Raises:
            ConfigurationError: On a missing method, missing url and params,
                unknown method, or inconsistent argument shapes
        """
        if method is None or (url is None and params is None):
            raise ConfigurationError("Method and URL or parameter block are required")

        method = Method.parse(method)
        supplied = {
            name: value for name, value in
            (('url', url), ('data', data), ('params', params))
            if value is not None
        }

        if any(isinstance(value, (list, tuple)) for value in supplied.values()):
            lengths = set()
            for name, value in supplied.items():
                if not isinstance(value, (list, tuple)):
                    raise ConfigurationError(
                        "URL, data and parameter blocks must be of consistent type and number of elements"
                    )
                lengths.add(len(value))

            if len(lengths) != 1:
                raise ConfigurationError(
                    "URL, data and parameter blocks must be of consistent type and number of elements"
                )

            count = lengths.pop()
            if count == 0:
                raise ConfigurationError("At least one URL or parameter block is required")

            targets = [
                Target(
                    url=cls._item(url, index),
                    data=cls._item(data, index),
                    params=cls._check_params(cls._item(params, index)),
                    has_data=data is not None
                )
                for index in range(count)
            ]
            return cls(method=method, targets=targets, batched=True)

        target = Target(
            url=url,
            data=data,
            params=cls._check_params(params),
            has_data=data is not None
        )
        return cls(method=method, targets=[target], batched=False)

    @staticmethod
    def _item(values, index):
        return None if values is None else values[index]

    @staticmethod
    def _check_params(params):
        if params is not None and not isinstance(params, dict):
            raise ConfigurationError(f"Parameter block must be an object, got {type(params).__name__}")
        return params

    def to_params(self) -> List[Dict[str, Any]]:
        """Outbound params: always a list, even for a single target"""
        return [target.to_param() for target in self.targets]

    def lookup_key(self, index: int, url: Optional[str]) -> str:
        """
        Key for the per-URL vector.

        Only add/set calls append the object name (or '[index]' when the
        data carries no name); other methods key on the URL alone.
        """
        key = url if url is not None else 'unknown_url'
        if self.method.names_objects:
            name = None
            if index < len(self.targets):
                name = self.targets[index].object_name
            key += f'/{name}' if name is not None else f'/[{index}]'
        return key

    def to_request(self, request_id: int, session: Optional[str] = None) -> Dict[str, Any]:
        """Serialize to the outbound wire body"""
        body = {
            "method": self.method.value,
            "params": self.to_params(),
            "id": request_id
        }
        if session is not None:
            body["session"] = session
        return body
