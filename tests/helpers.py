from storerate.models.user import User
from storerate.services.auth import token_for_user

PASSWORD = "Secret@123"


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}
