"""
Error types for the StudyBuddy API.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. ``main.py`` renders them as ``{"error": message}``.
"""


class StudyBuddyError(Exception):
    """Base exception for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class ValidationError(StudyBuddyError):
    """Client input has the wrong shape or size."""
    status_code = 400


class AuthError(StudyBuddyError):
    """Missing or rejected bearer credential."""
    status_code = 401


class UpstreamQuotaExceeded(StudyBuddyError):
    status_code = 402


class NotFoundError(StudyBuddyError):
    status_code = 404


class GoneError(StudyBuddyError):
    status_code = 410


class UpstreamRateLimited(StudyBuddyError):
    status_code = 429


class UpstreamError(StudyBuddyError):
    """Opaque failure talking to a remote service."""
    status_code = 500
