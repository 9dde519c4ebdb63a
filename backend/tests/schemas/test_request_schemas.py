"""Request schema validation: group creation defaults, registration, subject levels.

Invariants:
    - GroupCreate.level defaults to mixed; an empty level also means mixed
    - GroupCreate.max_members defaults to 10 and must be at least 1
    - Titles, display names and emails are stripped and must be non-empty
"""

import pytest
from pydantic import ValidationError

from studyhub.core.domain_types import DEFAULT_MAX_MEMBERS, GroupLevel
from studyhub.schemas.auth import RegisterRequest
from studyhub.schemas.group import GroupCreate
from studyhub.schemas.profile import UserSubjectUpsert


# --- GroupCreate --------------------------------------------------------------

def test_group_create_defaults():
    group = GroupCreate(title="Optics", subject_id=1)
    assert group.level is GroupLevel.MIXED
    assert group.max_members == DEFAULT_MAX_MEMBERS
    assert group.description is None


def test_group_create_empty_level_means_mixed():
    assert GroupCreate(title="Optics", subject_id=1, level="").level is GroupLevel.MIXED


def test_group_create_null_capacity_means_default():
    assert GroupCreate(title="Optics", subject_id=1, max_members=None).max_members == DEFAULT_MAX_MEMBERS


def test_group_create_strips_title():
    assert GroupCreate(title="  Optics  ", subject_id=1).title == "Optics"


@pytest.mark.parametrize("fields", [
    {"title": "   "},
    {"max_members": 0},
    {"level": "expert"},
    {"subject_id": 0},
])
def test_group_create_rejects(fields):
    with pytest.raises(ValidationError):
        GroupCreate(**{"title": "Optics", "subject_id": 1, **fields})


# --- RegisterRequest ----------------------------------------------------------

def test_register_strips_fields():
    req = RegisterRequest(email=" a@b.io ", password="pw", display_name=" Ann ")
    assert req.email == "a@b.io"
    assert req.display_name == "Ann"


def test_register_requires_at_sign():
    with pytest.raises(ValidationError):
        RegisterRequest(email="not-an-email", password="pw", display_name="Ann")


# --- UserSubjectUpsert --------------------------------------------------------

def test_user_subject_level_cannot_be_blank():
    with pytest.raises(ValidationError):
        UserSubjectUpsert(subject_id=1, level="  ")
