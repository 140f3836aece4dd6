from pydantic import Field
from typing import Literal, Optional
import uuid
from datetime import datetime

from storerate.models.base import CamelModel

Action = Literal[
    "user_registered",
    "password_changed",
    "user_created",
    "store_created",
    "rating_submitted",
    "rating_updated",
]

class ActivityLog(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str  # Who acted: the registering user, the admin, or the rater
    user_name: str
    action: Action
    details: str
    target_id: Optional[str] = None
    target_type: Optional[Literal["user", "store", "rating"]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
