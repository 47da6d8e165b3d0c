"""
Domain error taxonomy.

Services raise these; the API layer renders them as ``{"error": message}``
with the attached HTTP status code.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for errors that are safe to show to API callers."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(DomainError):
    """Bad login. The message never reveals which part was wrong."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(DomainError):
    """Wrong role or a mutation attempted by someone other than the owner."""

    status_code = 401
    default_message = "Unauthorized"


class SubscriptionInactive(DomainError):
    status_code = 403
    default_message = "Your subscription is not active. Please renew to continue."


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class SubscriberNotFound(NotFoundError):
    default_message = "Subscriber not found"


class ArticleNotFound(NotFoundError):
    default_message = "Article not found"


class CategoryNotFound(NotFoundError):
    default_message = "Category not found"


class SubcategoryNotFound(NotFoundError):
    default_message = "Subcategory not found"


class UserNotFound(NotFoundError):
    default_message = "User not found"


class ValidationError(DomainError):
    """Malformed input: missing localized text, missing form fields."""

    status_code = 400
    default_message = "Invalid input"


class InvalidStatusTransition(ValidationError):
    default_message = "Status transition not allowed"


class ResourceConflict(ValidationError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamFailure(DomainError):
    """Image storage or outbound notification failed."""

    status_code = 502
    default_message = "Upstream service failed"
