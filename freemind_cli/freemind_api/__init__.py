# freemind_cli/freemind_api/__init__.py
from .client import FreemindAPIClient, is_xml_response
from .exceptions import (
    FreemindError, TransportFailure, APIConnectionError, APIResponseError,
    AuthenticationError, DecodeFailure, SyncInProgressError
)

__all__ = [
    "FreemindAPIClient", "is_xml_response",
    "FreemindError", "TransportFailure", "APIConnectionError", "APIResponseError",
    "AuthenticationError", "DecodeFailure", "SyncInProgressError",
]
