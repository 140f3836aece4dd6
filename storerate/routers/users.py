import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Literal, Optional

from storerate.models.user import User, UserResponse, AdminUserCreate, DashboardStats, Role
from storerate.models.log import Action, ActivityLog
from storerate.db.session import get_db
from storerate.services.auth import get_admin_user
from storerate.services.log import log_activity
from storerate.services.query import contains, find_sorted
from storerate.services.user import (
    create_store_for_owner,
    create_user,
    ensure_store_email_free,
    to_user_response,
)

logger = logging.getLogger(__name__)

# Every route here is admin only
router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(get_admin_user)])

UserSortField = Literal["name", "email", "address", "role", "createdAt"]

@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(db=Depends(get_db)):
    return DashboardStats(
        total_users=await db.users.count_documents({}),
        total_stores=await db.stores.count_documents({}),
        total_ratings=await db.ratings.count_documents({}),
    )

@router.get("/activity-logs", response_model=List[ActivityLog])
async def get_activity_logs(
    limit: int = Query(100, ge=1, le=500),
    action: Optional[Action] = None,
    db=Depends(get_db)
):
    query = {}
    if action:
        query["action"] = action

    logs = await db.activity_logs.find(query).sort("created_at", -1).to_list(limit)
    return [ActivityLog(**log) for log in logs]

@router.get("", response_model=List[UserResponse])
async def get_users(
    name: Optional[str] = None,
    email: Optional[str] = None,
    address: Optional[str] = None,
    role: Optional[Role] = None,
    sort_by: Optional[UserSortField] = Query(None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    db=Depends(get_db)
):
    query = {}
    if name:
        query["name"] = contains(name)
    if email:
        query["email"] = contains(email)
    if address:
        query["address"] = contains(address)
    if role:
        query["role"] = role

    users = await find_sorted(db.users, query, sort_by, sort_order)
    return [await to_user_response(db, user) for user in users]

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db=Depends(get_db)):
    user = await db.users.find_one({"id": user_id})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return await to_user_response(db, user)

@router.post("", response_model=UserResponse, status_code=201)
async def create_user_account(
    request: Request,
    user_data: AdminUserCreate,
    admin_user: User = Depends(get_admin_user),
    db=Depends(get_db)
):
    store_fields = (user_data.store_name, user_data.store_email, user_data.store_address)
    if user_data.role == "storeOwner":
        if not all(store_fields):
            raise HTTPException(status_code=400, detail="Store details are required for store owner")
        if await db.users.find_one({"email": user_data.email}):
            raise HTTPException(status_code=400, detail="User already exists")
        await ensure_store_email_free(db, user_data.store_email)

    user_obj = await create_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        address=user_data.address,
        role=user_data.role,
    )

    if user_data.role == "storeOwner":
        store_obj = await create_store_for_owner(
            db,
            owner=user_obj,
            name=user_data.store_name,
            email=user_data.store_email,
            address=user_data.store_address,
        )
        logger.info(f"Created store {store_obj.id} for new owner {user_obj.id}")

    await log_activity(
        db,
        user_id=admin_user.id,
        user_name=admin_user.name,
        action="user_created",
        details=f"Created {user_obj.role} account {user_obj.email}",
        target_id=user_obj.id,
        target_type="user",
        request=request
    )

    created = await db.users.find_one({"id": user_obj.id})
    return await to_user_response(db, created)
