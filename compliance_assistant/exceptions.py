"""Custom exceptions for the compliance assistant.

None of these are fatal to the process. Each carries a message that is safe
to show to the user.
"""


class AssistantError(Exception):
    """Base exception for the compliance assistant."""
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class InvalidInput(AssistantError):
    """Raised for a malformed email, weak secret or blank required field."""
    default_message = "Please fill in all fields"


class DuplicateAccount(AssistantError):
    """Raised when an account with the same email already exists."""
    default_message = "User with this email already exists"


class NotFound(AssistantError):
    """Raised when no account has the requested id."""
    default_message = "User not found"


class InvalidCredentials(AssistantError):
    """Raised on failed login. Never says which of email or secret was wrong."""
    default_message = "Invalid email or password"


class Forbidden(AssistantError):
    """Raised when the caller lacks the administrative capability."""
    default_message = "You do not have permission to manage users."


class NotAuthenticated(Forbidden):
    """Raised when an operation needs a session and there is none."""
    default_message = "Please log in first"


class QuotaExceeded(AssistantError):
    """Raised when the caller's quota ceiling has been reached."""
    default_message = (
        "You have reached your query limit. "
        "Please upgrade to Pro for unlimited access."
    )


class EmptyMessage(AssistantError):
    """Raised when the message is blank after trimming and sanitizing."""
    default_message = "Message required"


class ExchangeInProgress(AssistantError):
    """Raised when a send is attempted while another is still pending."""
    default_message = "Please wait for the current reply"


class TransportFailure(AssistantError):
    """Raised by responders when the backend is unreachable or misbehaves."""
    default_message = "Service temporarily unavailable"


class InvalidTransition(AssistantError):
    """Raised when a view transition is not allowed from the current state."""
    default_message = "That screen is not available right now"
