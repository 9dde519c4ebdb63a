"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, GroupId, SubjectId wrap ints (database serial keys)
    - A storable id lies in 1..MAX_ROW_ID (32-bit INTEGER columns); anything
      outside that range cannot name a row
    - All valid states encoded as Enums: no raw string matching in domain logic

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
GroupId = NewType("GroupId", int)
SubjectId = NewType("SubjectId", int)


# ─── Limits ──────────────────────────────────────────────────────

DEFAULT_MAX_MEMBERS = 10
MATCH_RESULT_LIMIT = 50
MESSAGE_PAGE_LIMIT = 200
MAX_ROW_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ROW_ID


# ─── Enums ───────────────────────────────────────────────────────

class GroupLevel(str, Enum):
    """Skill level a group targets. MIXED matches every level filter."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    MIXED = "mixed"


class MemberRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


class MatchType(str, Enum):
    """Search mode for the match endpoint. Anything other than group means users."""
    GROUP = "group"
    USER = "user"


class AdmissionOutcome(str, Enum):
    """Terminal states of a single join attempt."""
    ADMITTED = "admitted"
    NOT_FOUND = "not_found"
    ALREADY_MEMBER = "already_member"
    FULL = "full"
    FAILED = "failed"
