from pydantic import Field
from typing import List, Optional
import uuid
from datetime import datetime

from storerate.models.base import CamelModel

class Rating(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    store_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)  # 1-5 stars
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class RatingCreate(CamelModel):
    store_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)

class RatingSubmitResponse(CamelModel):
    message: str
    rating: Rating

class RaterSummary(CamelModel):
    id: str
    name: str
    email: str
    address: str

class StoreRatingEntry(CamelModel):
    id: str
    rating: int
    # The rater replaces the bare user id, as the owner dashboard expects
    user: Optional[RaterSummary] = Field(None, alias="userId")
    created_at: datetime
    updated_at: datetime

class StoreRatings(CamelModel):
    average_rating: float
    total_ratings: int
    ratings: List[StoreRatingEntry]

class MyStoreRating(CamelModel):
    rating: Optional[Rating] = None
