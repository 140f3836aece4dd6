import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from storerate.models.rating import Rating, RatingCreate, RatingSubmitResponse, MyStoreRating
from storerate.models.user import User
from storerate.db.session import get_db
from storerate.services.auth import get_current_user
from storerate.services.log import log_activity
from storerate.services.rating import submit_rating

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ratings", tags=["ratings"])

@router.post("", response_model=RatingSubmitResponse)
async def create_or_update_rating(
    request: Request,
    response: Response,
    rating_data: RatingCreate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db)
):
    if current_user.role != "user":
        raise HTTPException(status_code=403, detail="Only normal users can submit ratings")

    store = await db.stores.find_one({"id": rating_data.store_id})
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")

    rating_obj, created = await submit_rating(db, rating_data.store_id, current_user.id, rating_data.rating)
    logger.info(
        f"User {current_user.id} {'rated' if created else 're-rated'} store {rating_data.store_id}: {rating_data.rating}"
    )

    await log_activity(
        db,
        user_id=current_user.id,
        user_name=current_user.name,
        action="rating_submitted" if created else "rating_updated",
        details=f"Rated store {store['name']} {rating_data.rating}/5",
        target_id=rating_obj.id,
        target_type="rating",
        request=request
    )

    message = "Rating submitted successfully" if created else "Rating updated successfully"
    response.status_code = 201 if created else 200
    return RatingSubmitResponse(message=message, rating=rating_obj)

@router.get("/store/{store_id}", response_model=MyStoreRating)
async def get_my_store_rating(
    store_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db)
):
    rating = await db.ratings.find_one({"store_id": store_id, "user_id": current_user.id})
    return MyStoreRating(rating=Rating(**rating) if rating else None)
