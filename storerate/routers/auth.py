import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from storerate.models.user import Token, UserCreate, UserLogin, User, PasswordChangeRequest, CurrentUser
from storerate.db.session import get_db
from storerate.services.auth import (
    get_current_user,
    hash_password,
    token_for_user,
    verify_password,
)
from storerate.services.log import log_activity
from storerate.services.user import create_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=Token, status_code=201)
async def register(request: Request, user_data: UserCreate, db=Depends(get_db)):
    # Self-registration always produces a normal user
    user_obj = await create_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        address=user_data.address,
        role="user",
    )

    await log_activity(
        db,
        user_id=user_obj.id,
        user_name=user_obj.name,
        action="user_registered",
        details=f"Registered account {user_obj.email}",
        target_id=user_obj.id,
        target_type="user",
        request=request
    )

    return Token(token=token_for_user(user_obj), user=user_obj)


@router.post("/login", response_model=Token)
async def login(user_data: UserLogin, db=Depends(get_db)):
    user = await db.users.find_one({"email": user_data.email})
    if not user or not verify_password(user_data.password, user["hashed_password"]):
        logger.info(f"Failed login attempt for {user_data.email}")
        raise HTTPException(status_code=400, detail="Invalid credentials")

    user_obj = User(**user)
    logger.info(f"Login successful for {user_obj.email} (role: {user_obj.role})")
    return Token(token=token_for_user(user_obj), user=user_obj)


@router.put("/update-password")
async def update_password(
    request: Request,
    password_data: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db)
):
    user = await db.users.find_one({"id": current_user.id})
    if not verify_password(password_data.current_password, user["hashed_password"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    await db.users.update_one(
        {"id": current_user.id},
        {"$set": {"hashed_password": hash_password(password_data.new_password)}}
    )

    await log_activity(
        db,
        user_id=current_user.id,
        user_name=current_user.name,
        action="password_changed",
        details="Changed account password",
        target_id=current_user.id,
        target_type="user",
        request=request
    )

    return {"message": "Password updated successfully"}


@router.get("/me", response_model=CurrentUser)
async def get_me(current_user: User = Depends(get_current_user)):
    return CurrentUser(user=current_user)
