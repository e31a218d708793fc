"""
Errors raised along the probe pipeline.

Every ``ProbeError`` except ``TransportFailure`` is a protocol error answered
with a 400 response whose body is ``error: <message>``.
"""


class ProbeError(Exception):
    """Base class for probe pipeline errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameter(ProbeError):
    def __init__(self, name: str):
        super().__init__(f"{name} parameter is missing")
        self.name = name


class UnknownModule(ProbeError):
    def __init__(self, name: str):
        super().__init__(f"unknown module: {name}")
        self.name = name


class UnsupportedMethod(ProbeError):
    def __init__(self, method: str):
        super().__init__("sorry, this only accept GET method")
        self.method = method


class BodyNotAllowed(ProbeError):
    def __init__(self, method: str):
        super().__init__(f"body is not allowed for {method} method")
        self.method = method


class InvalidTargetScheme(ProbeError):
    def __init__(self, target: str):
        super().__init__("target must use http or https scheme")
        self.target = target


class TargetNotAllowed(ProbeError):
    def __init__(self, target: str):
        super().__init__("target is not allowed in probe config")
        self.target = target


class InvalidTarget(ProbeError):
    def __init__(self, target: str):
        super().__init__(f"invalid target: {target}")
        self.target = target


class TransportFailure(ProbeError):
    """
    The outbound probe request failed at the network level. Reported as a
    failed probe outcome rather than an error response.
    """

    def __init__(self, target: str, cause: Exception):
        super().__init__(f"probe request to {target} failed: {cause!r}")
        self.target = target
        self.cause = cause
