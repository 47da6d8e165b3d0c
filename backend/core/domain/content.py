"""Content domain definitions: article status machine."""
from enum import Enum


class ArticleStatus(str, Enum):
    """Article moderation status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DISABLED = "DISABLED"


# Transitions an admin may apply. Re-applying the current status is always
# allowed and treated as a no-op. Any live article may be disabled. Writer
# edits return a live article to PENDING outside this table.
ALLOWED_TRANSITIONS: dict[ArticleStatus, frozenset[ArticleStatus]] = {
    ArticleStatus.PENDING: frozenset(
        {ArticleStatus.APPROVED, ArticleStatus.REJECTED, ArticleStatus.DISABLED}
    ),
    ArticleStatus.APPROVED: frozenset({ArticleStatus.DISABLED}),
    ArticleStatus.REJECTED: frozenset({ArticleStatus.DISABLED}),
    ArticleStatus.DISABLED: frozenset(),
}


def can_transition(current: ArticleStatus, target: ArticleStatus) -> bool:
    """Return True if moving from *current* to *target* is permitted."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def can_disable(current: ArticleStatus) -> bool:
    """True if an admin may soft-delete an article in *current* status."""
    return ArticleStatus.DISABLED in ALLOWED_TRANSITIONS[current]
