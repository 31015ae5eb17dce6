"""
fortiapi Exceptions

Only configuration problems and failed session establishment raise.
Transport, decode and application errors are reported through the
returned status instead.
"""


class FortiAPIError(Exception):
    """Base class for all fortiapi errors"""


class ConfigurationError(FortiAPIError, ValueError):
    """Missing or inconsistent input, detected before any network I/O"""


class SessionError(FortiAPIError, RuntimeError):
    """No valid session could be established with the appliance"""
