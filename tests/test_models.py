import pytest
from pydantic import ValidationError

from storerate.models.user import (
    AdminUserCreate,
    UserCreate,
    validate_address,
    validate_email,
    validate_name,
    validate_password,
)


def test_name_is_trimmed_and_bounded():
    assert validate_name("   Exactly Twenty Chars   ") == "Exactly Twenty Chars"
    with pytest.raises(ValueError, match="Name must be 20-60 characters"):
        validate_name("x" * 19)
    with pytest.raises(ValueError, match="Store name must be 20-60 characters"):
        validate_name("x" * 61, "Store name")


def test_email_is_normalized():
    assert validate_email("  Mixed.Case@Example.COM ") == "mixed.case@example.com"
    for bad in ("plain", "no-dot@domain", "spaces in@x.com"):
        with pytest.raises(ValueError, match="Please provide a valid email"):
            validate_email(bad)


def test_address_limits():
    assert validate_address("x" * 400) == "x" * 400
    with pytest.raises(ValueError, match="Address cannot exceed 400 characters"):
        validate_address("x" * 401)
    with pytest.raises(ValueError, match="Address is required"):
        validate_address("   ")


@pytest.mark.parametrize("password,message", [
    ("Sh@rt1", "Password must be 8-16 characters"),
    ("Way@TooLongPassword1", "Password must be 8-16 characters"),
    ("lowercase@only", "Password must contain at least one uppercase letter"),
    ("NoSpecialChar1", "Password must contain at least one special character"),
])
def test_password_rules(password, message):
    with pytest.raises(ValueError, match=message):
        validate_password(password)


def test_password_accepts_valid():
    assert validate_password("Good{Pass}") == "Good{Pass}"


def test_user_create_collects_field_errors():
    with pytest.raises(ValidationError) as exc_info:
        UserCreate(name="short", email="bad", password="bad", address="")

    fields = {err["loc"][0] for err in exc_info.value.errors()}
    assert fields == {"name", "email", "password", "address"}


def test_admin_user_create_validates_optional_store_fields():
    with pytest.raises(ValidationError) as exc_info:
        AdminUserCreate(
            name="Store Owner With Valid Name",
            email="owner@example.com",
            password="Valid@Pass1",
            address="1 Street",
            role="storeOwner",
            store_name="Tiny",
            store_email="shop@example.com",
            store_address="1 Street",
        )

    assert exc_info.value.errors()[0]["loc"] == ("storeName",)


def test_admin_user_create_defaults_to_user_role():
    user = AdminUserCreate(
        name="Plain User With Valid Name",
        email="plain@example.com",
        password="Valid@Pass1",
        address="1 Street",
    )

    assert user.role == "user"
    assert user.store_name is None
