# freemind_cli/freemind_api/exceptions.py
#
#
#######################################################################################################################
#
# Functions:
from typing import Optional


class FreemindError(Exception):
    """Base exception for freemind_cli errors."""
    pass

class TransportFailure(FreemindError):
    """Raised when the registry server could not be reached or answered with an error."""
    pass

class APIConnectionError(TransportFailure):
    """Raised for network or connection issues."""
    pass

class APIResponseError(TransportFailure):
    """Raised for non-2xx responses where the caller requires success."""
    def __init__(self, status_code: int, message: str, response_text: Optional[str] = None):
        super().__init__(f"API Error {status_code}: {message}")
        self.status_code = status_code
        self.response_text = response_text or ""

class AuthenticationError(APIResponseError):
    """Raised for authentication failures."""
    pass

class DecodeFailure(FreemindError):
    """Raised when a registry document does not parse as the expected schema."""
    pass

class SyncInProgressError(FreemindError):
    """Raised when a sync is requested while another one is still running."""
    pass

#
# End of freemind_cli/freemind_api/exceptions.py
########################################################################################################################
