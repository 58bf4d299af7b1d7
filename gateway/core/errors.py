# error taxonomy shared by adapters, router and API layer
# the api maps each class to one status code so it can tell user errors from provider faults

import json
from typing import Any, Mapping, Optional


class GatewayError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Request is malformed or insufficient (client error, never retried)."""


class ConfigurationError(GatewayError):
    """Deployment is missing a credential, a model or a usable client library."""


class ProviderError(GatewayError):
    """Backend rejected the call or could not be reached."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def normalize_error(err: Any) -> str:
    # string passthrough -> message field -> str(exc) -> json dump
    if isinstance(err, str):
        return err
    if isinstance(err, Mapping):
        message = err.get("message")
    else:
        message = getattr(err, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(err, BaseException):
        text = str(err)
        if text:
            return text
        return type(err).__name__
    try:
        return json.dumps(err)
    except (TypeError, ValueError):
        return "Unknown error"
