"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata (Alembic, create_all) sees every
      table and ForeignKey target before use
"""

from studyhub.models.user import User  # noqa: F401
from studyhub.models.profile import Profile, UserSubject  # noqa: F401
from studyhub.models.subject import Subject  # noqa: F401
from studyhub.models.group import Group, GroupMember  # noqa: F401
from studyhub.models.message import GroupMessage  # noqa: F401
