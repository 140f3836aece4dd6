from pydantic import Field, field_validator
from typing import Optional
import uuid
from datetime import datetime

from storerate.models.base import CamelModel

from storerate.models.user import validate_name, validate_email, validate_address, validate_password

class Store(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    address: str
    owner_id: str
    average_rating: float = Field(0.0, ge=0, le=5)
    total_ratings: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class StoreCreate(CamelModel):
    name: str
    email: str
    address: str
    owner_name: str
    owner_email: str
    owner_password: str
    owner_address: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator("owner_name")
    @classmethod
    def check_owner_name(cls, v):
        return validate_name(v, "Owner name")

    @field_validator("email", "owner_email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("address")
    @classmethod
    def check_address(cls, v):
        return validate_address(v)

    @field_validator("owner_address")
    @classmethod
    def check_owner_address(cls, v):
        return validate_address(v, "Owner address")

    @field_validator("owner_password")
    @classmethod
    def check_owner_password(cls, v):
        return validate_password(v)

class OwnerSummary(CamelModel):
    id: str
    name: str
    email: str

class StoreResponse(Store):
    owner: Optional[OwnerSummary] = None

class StoreListItem(Store):
    user_rating: Optional[int] = None  # Only filled in for the "user" role
