"""Rating submission and the per-store aggregate counters.

A store keeps ``rating_sum`` and ``total_ratings`` next to the published
``average_rating``. Counters only ever move through a single atomic ``$inc``;
the average is then written with a compare-and-set on the counters that were
observed, so whichever writer saw the latest counters is the one whose average
sticks.
"""
from datetime import datetime
import logging

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from storerate.models.rating import Rating

logger = logging.getLogger(__name__)

def compute_average(rating_sum: float, total_ratings: int) -> float:
    if total_ratings <= 0:
        return 0.0
    return rating_sum / total_ratings

async def _publish_average(db, store):
    rating_sum = store.get("rating_sum", 0)
    total_ratings = store.get("total_ratings", 0)
    await db.stores.update_one(
        {"id": store["id"], "rating_sum": rating_sum, "total_ratings": total_ratings},
        {"$set": {
            "average_rating": compute_average(rating_sum, total_ratings),
            "updated_at": datetime.utcnow()
        }}
    )

async def apply_new_rating(db, store_id: str, value: int):
    """Count a brand new rating into the store aggregate"""
    store = await db.stores.find_one_and_update(
        {"id": store_id},
        {"$inc": {"rating_sum": value, "total_ratings": 1}},
        return_document=ReturnDocument.AFTER
    )
    if store:
        await _publish_average(db, store)
    return store

async def apply_rating_change(db, store_id: str, old_value: int, new_value: int):
    """Swap an existing rating's value inside the store aggregate"""
    store = await db.stores.find_one_and_update(
        {"id": store_id},
        {"$inc": {"rating_sum": new_value - old_value}},
        return_document=ReturnDocument.AFTER
    )
    if store:
        await _publish_average(db, store)
    return store

async def recalculate_store_rating(db, store_id: str):
    """Rebuild a store's counters from its ratings"""
    ratings = await db.ratings.find({"store_id": store_id}).to_list(None)
    rating_sum = sum(r["rating"] for r in ratings)
    total_ratings = len(ratings)

    await db.stores.update_one(
        {"id": store_id},
        {"$set": {
            "rating_sum": rating_sum,
            "total_ratings": total_ratings,
            "average_rating": compute_average(rating_sum, total_ratings),
            "updated_at": datetime.utcnow()
        }}
    )
    return total_ratings

async def submit_rating(db, store_id: str, user_id: str, value: int):
    """Create or update the user's rating for a store.

    Returns ``(rating, created)``.
    """
    now = datetime.utcnow()
    existing = await db.ratings.find_one_and_update(
        {"store_id": store_id, "user_id": user_id},
        {"$set": {"rating": value, "updated_at": now}},
        return_document=ReturnDocument.BEFORE
    )
    if existing:
        await apply_rating_change(db, store_id, existing["rating"], value)
        existing.update({"rating": value, "updated_at": now})
        return Rating(**existing), False

    rating_obj = Rating(store_id=store_id, user_id=user_id, rating=value)
    try:
        await db.ratings.insert_one(rating_obj.model_dump())
    except DuplicateKeyError:
        # Another request for the same user and store won the insert
        logger.info(f"Concurrent rating insert for store {store_id}, retrying as update")
        return await submit_rating(db, store_id, user_id, value)

    await apply_new_rating(db, store_id, value)
    return rating_obj, True
