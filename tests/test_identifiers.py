import pytest

from chapter_registry_api.app.services.identifiers import (
    IdentifierKind,
    UserIdentifier,
    classify_identifier,
)


@pytest.mark.parametrize(
    "value, kind",
    [
        ("warrior@example.com", IdentifierKind.EMAIL),
        ("3f2b8c1e-9d4a-4e7b-8c6f-0a1b2c3d4e5f", IdentifierKind.USER_ID),
        ("3F2B8C1E-9D4A-4E7B-8C6F-0A1B2C3D4E5F", IdentifierKind.USER_ID),
        ("108234567890123456789", IdentifierKind.GOOGLE_USER_ID),
        ("3f2b8c1e-9d4a-4e7b-8c6f", IdentifierKind.GOOGLE_USER_ID),
        ("3f2b8c1e-9d4a-4e7b-8c6f-0a1b2c3d4e5f\n", IdentifierKind.GOOGLE_USER_ID),
    ],
)
def test_classify_identifier(value, kind) -> None:
    assert classify_identifier(value) == UserIdentifier(kind, value)


def test_at_sign_wins_over_uuid_shape() -> None:
    # Ordered predicates: anything with "@" is an e-mail.
    assert classify_identifier("3f2b8c1e@example.com").kind is IdentifierKind.EMAIL


def test_kind_maps_to_column() -> None:
    assert IdentifierKind.EMAIL.column == "Email"
    assert IdentifierKind.USER_ID.column == "User_ID"
    assert IdentifierKind.GOOGLE_USER_ID.column == "GoogleUserId"
