"""
Classification of the free-form identifier accepted by user deletion.

``DELETE /users/{identifier}`` accepts an e‑mail address, a public
``User_ID`` (UUID) or a Google user id in the same path segment.  The
kind is decided by checking a fixed list of shape predicates in
order; the first match wins and anything unmatched is treated as a
Google user id.  This is best effort: a Google id containing ``@``
would be misread as an e‑mail, which is acceptable because provider
ids never contain that character.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Tuple

UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


class IdentifierKind(str, Enum):
    """Kind of user identifier.  Values are the matching column names."""

    EMAIL = "Email"
    USER_ID = "User_ID"
    GOOGLE_USER_ID = "GoogleUserId"

    @property
    def column(self) -> str:
        return self.value


@dataclass(frozen=True)
class UserIdentifier:
    kind: IdentifierKind
    value: str


_PREDICATES: List[Tuple[Callable[[str], bool], IdentifierKind]] = [
    (lambda value: "@" in value, IdentifierKind.EMAIL),
    (lambda value: UUID_PATTERN.fullmatch(value) is not None, IdentifierKind.USER_ID),
]


def classify_identifier(value: str) -> UserIdentifier:
    """Resolve ``value`` to a tagged identifier."""
    for predicate, kind in _PREDICATES:
        if predicate(value):
            return UserIdentifier(kind, value)
    return UserIdentifier(IdentifierKind.GOOGLE_USER_ID, value)
