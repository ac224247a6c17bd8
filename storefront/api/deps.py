# storefront/api/deps.py
from fastapi import Depends, HTTPException, Request

from storefront.domain.entities import Role, User
from storefront.repos.storage import Storage

SESSION_USER_KEY = "user_id"


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = storage.get_user(user_id)
    if not user:
        #session points at a deleted account
        request.session.clear()
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
