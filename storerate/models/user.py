from pydantic import Field, field_validator
from typing import Literal, Optional
import re
import uuid
from datetime import datetime

from storerate.models.base import CamelModel

Role = Literal["admin", "user", "storeOwner"]

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
SPECIAL_CHARS_RE = re.compile(r'[!@#$%^&*(),.?":{}|<>]')

# Field rules shared by users and stores
def validate_name(value: str, label: str = "Name") -> str:
    value = value.strip()
    if not 20 <= len(value) <= 60:
        raise ValueError(f"{label} must be 20-60 characters")
    return value

def validate_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email")
    return value

def validate_address(value: str, label: str = "Address") -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    if len(value) > 400:
        raise ValueError(f"{label} cannot exceed 400 characters")
    return value

def validate_password(value: str) -> str:
    if not 8 <= len(value) <= 16:
        raise ValueError("Password must be 8-16 characters")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not SPECIAL_CHARS_RE.search(value):
        raise ValueError("Password must contain at least one special character")
    return value

# Authentication models
class UserCreate(CamelModel):
    name: str
    email: str
    password: str
    address: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("address")
    @classmethod
    def check_address(cls, v):
        return validate_address(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return validate_password(v)

class UserLogin(CamelModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v):
        return validate_password(v)

class AdminUserCreate(UserCreate):
    role: Role = "user"
    # Required only when role is storeOwner
    store_name: Optional[str] = None
    store_email: Optional[str] = None
    store_address: Optional[str] = None

    @field_validator("store_name")
    @classmethod
    def check_store_name(cls, v):
        return validate_name(v, "Store name") if v is not None else v

    @field_validator("store_email")
    @classmethod
    def check_store_email(cls, v):
        return validate_email(v) if v is not None else v

    @field_validator("store_address")
    @classmethod
    def check_store_address(cls, v):
        return validate_address(v, "Store address") if v is not None else v

class User(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    address: str
    role: Role = "user"
    store_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class StoreSummary(CamelModel):
    id: str
    name: str
    average_rating: float = 0.0

class UserResponse(User):
    store: Optional[StoreSummary] = None

class Token(CamelModel):
    token: str
    user: User

class CurrentUser(CamelModel):
    user: User

class DashboardStats(CamelModel):
    total_users: int
    total_stores: int
    total_ratings: int
