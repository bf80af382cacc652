class PortalError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code = 400
    default_message = "Request failed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(PortalError):
    status_code = 401
    default_message = "Authentication required."


class AccessDenied(PortalError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class ComplaintNotFound(PortalError):
    status_code = 404
    default_message = "Complaint not found."


class InvalidStatus(PortalError):
    default_message = "Invalid status."


class InvalidFeedback(PortalError):
    default_message = "Feedback must not be empty."


class FeedbackNotAllowed(PortalError):
    status_code = 409
    default_message = "Feedback can only be attached to a rejected complaint."
