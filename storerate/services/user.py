from datetime import datetime
from typing import Optional
import logging

from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from storerate.models.user import User, UserResponse, StoreSummary
from storerate.models.store import Store
from storerate.services.auth import hash_password

logger = logging.getLogger(__name__)

async def create_user(db, name: str, email: str, password: str, address: str, role: str = "user") -> User:
    existing_user = await db.users.find_one({"email": email})
    if existing_user:
        raise HTTPException(status_code=400, detail="User already exists")

    user_obj = User(name=name, email=email, address=address, role=role)
    user_doc = user_obj.model_dump()
    user_doc["hashed_password"] = hash_password(password)
    try:
        await db.users.insert_one(user_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")
    return user_obj

async def create_store_for_owner(db, owner: User, name: str, email: str, address: str) -> Store:
    """Create a store and link it to its owner both ways"""
    store_obj = Store(name=name, email=email, address=address, owner_id=owner.id)
    store_doc = store_obj.model_dump()
    store_doc["rating_sum"] = 0
    try:
        await db.stores.insert_one(store_doc)
    except DuplicateKeyError:
        # Undo the owner so no storeOwner is left without a store
        logger.warning(f"Store email {email} taken concurrently, removing owner {owner.id}")
        await db.users.delete_one({"id": owner.id})
        raise HTTPException(status_code=400, detail="Store email already exists")

    await db.users.update_one(
        {"id": owner.id},
        {"$set": {"store_id": store_obj.id, "updated_at": datetime.utcnow()}}
    )
    owner.store_id = store_obj.id
    return store_obj

async def ensure_store_email_free(db, email: str):
    existing_store = await db.stores.find_one({"email": email})
    if existing_store:
        raise HTTPException(status_code=400, detail="Store email already exists")

async def get_store_summary(db, store_id: Optional[str]) -> Optional[StoreSummary]:
    if not store_id:
        return None
    store = await db.stores.find_one({"id": store_id})
    if not store:
        return None
    return StoreSummary(**store)

async def to_user_response(db, user: dict) -> UserResponse:
    user = {k: v for k, v in user.items() if k != "hashed_password"}
    user["store"] = await get_store_summary(db, user.get("store_id"))
    return UserResponse(**user)
