class WalletError(Exception):
    """Base class for classified workflow errors.

    ``kind`` is the classification tag, ``message`` is the short text shown
    to the user as is.
    """
    kind = "WalletError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WalletUnavailable(WalletError):
    """Raised when the signing agent is not present."""
    kind = "WalletUnavailable"


class AccessDenied(WalletError):
    """Raised when the user declines access or the agent returns an error."""
    kind = "AccessDenied"


class SigningDeclined(WalletError):
    """Raised when the agent refuses to sign."""
    kind = "SigningDeclined"


class AccountNotFound(WalletError):
    """Raised when Horizon reports the account does not exist."""
    kind = "AccountNotFound"


class ValidationError(WalletError):
    """Raised on bad caller input, before any network call."""
    kind = "ValidationError"


class NetworkError(WalletError):
    """Raised on transport, timeout or parse failures."""
    kind = "NetworkError"

    def __init__(self, message: str, extras: dict = None):
        super().__init__(message)
        self.extras = extras


class SubmissionRejected(WalletError):
    """Raised when Horizon rejects a submitted transaction."""
    kind = "SubmissionRejected"

    def __init__(self, message: str, result_codes: dict = None, hint: str = None):
        super().__init__(message)
        self.result_codes = result_codes
        self.hint = hint


class InvalidTransition(Exception):
    """Raised when an event is not allowed in the current workflow state."""
