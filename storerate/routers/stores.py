import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Literal, Optional

from storerate.models.store import StoreCreate, StoreListItem, StoreResponse, OwnerSummary
from storerate.models.rating import StoreRatings, StoreRatingEntry, RaterSummary
from storerate.models.user import User
from storerate.db.session import get_db
from storerate.services.auth import get_admin_user, get_current_user, require_roles
from storerate.services.log import log_activity
from storerate.services.query import contains, find_sorted
from storerate.services.user import create_store_for_owner, create_user, ensure_store_email_free

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stores", tags=["stores"])

StoreSortField = Literal["name", "email", "address", "averageRating", "totalRatings", "createdAt"]

async def _store_response(db, store: dict) -> StoreResponse:
    owner = await db.users.find_one({"id": store["owner_id"]})
    return StoreResponse(**store, owner=OwnerSummary(**owner) if owner else None)

@router.get("", response_model=List[StoreListItem])
async def get_stores(
    search: Optional[str] = None,
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    sort_by: Optional[StoreSortField] = Query(None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    current_user: User = Depends(get_current_user),
    db=Depends(get_db)
):
    query = {}
    # search matches name or address and takes over those two filters
    if search:
        query["$or"] = [
            {"name": contains(search)},
            {"address": contains(search)}
        ]
    else:
        if name:
            query["name"] = contains(name)
        if address:
            query["address"] = contains(address)
    if email:
        query["email"] = contains(email)

    stores = await find_sorted(db.stores, query, sort_by, sort_order)

    if current_user.role != "user":
        return [StoreListItem(**store) for store in stores]

    own_ratings = await db.ratings.find({
        "user_id": current_user.id,
        "store_id": {"$in": [store["id"] for store in stores]}
    }).to_list(None)
    by_store = {r["store_id"]: r["rating"] for r in own_ratings}

    return [StoreListItem(**store, user_rating=by_store.get(store["id"])) for store in stores]

@router.get("/{store_id}", response_model=StoreResponse)
async def get_store(store_id: str, current_user: User = Depends(get_current_user), db=Depends(get_db)):
    store = await db.stores.find_one({"id": store_id})
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return await _store_response(db, store)

@router.get("/{store_id}/ratings", response_model=StoreRatings)
async def get_store_ratings(
    store_id: str,
    current_user: User = Depends(require_roles("admin", "storeOwner")),
    db=Depends(get_db)
):
    store = await db.stores.find_one({"id": store_id})
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")

    # Owners only see their own store
    if current_user.role == "storeOwner" and store["owner_id"] != current_user.id:
        raise HTTPException(status_code=403, detail="Access denied")

    ratings = await db.ratings.find({"store_id": store_id}).sort("created_at", -1).to_list(None)
    raters = await db.users.find({"id": {"$in": [r["user_id"] for r in ratings]}}).to_list(None)
    raters_by_id = {u["id"]: RaterSummary(**u) for u in raters}

    return StoreRatings(
        average_rating=store.get("average_rating", 0.0),
        total_ratings=store.get("total_ratings", 0),
        ratings=[
            StoreRatingEntry(**r, user=raters_by_id.get(r["user_id"]))
            for r in ratings
        ]
    )

@router.post("", response_model=StoreResponse, status_code=201)
async def create_store(
    request: Request,
    store_data: StoreCreate,
    admin_user: User = Depends(get_admin_user),
    db=Depends(get_db)
):
    await ensure_store_email_free(db, store_data.email)
    if await db.users.find_one({"email": store_data.owner_email}):
        raise HTTPException(status_code=400, detail="Owner email already exists")

    owner = await create_user(
        db,
        name=store_data.owner_name,
        email=store_data.owner_email,
        password=store_data.owner_password,
        address=store_data.owner_address,
        role="storeOwner",
    )
    store_obj = await create_store_for_owner(
        db,
        owner=owner,
        name=store_data.name,
        email=store_data.email,
        address=store_data.address,
    )
    logger.info(f"Store {store_obj.id} created by admin {admin_user.id}")

    await log_activity(
        db,
        user_id=admin_user.id,
        user_name=admin_user.name,
        action="store_created",
        details=f"Created store {store_obj.name} owned by {owner.email}",
        target_id=store_obj.id,
        target_type="store",
        request=request
    )

    store = await db.stores.find_one({"id": store_obj.id})
    return await _store_response(db, store)
