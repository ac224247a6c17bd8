# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.api.deps import SESSION_USER_KEY, get_current_user, get_storage
from storefront.domain.entities import User
from storefront.domain.schemas import LoginIn, MessageOut, RegisterIn, UserOut
from storefront.repos.storage import Storage
from storefront.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_service(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage)


@router.post("/register", response_model=UserOut, status_code=201)
def register(
    payload: RegisterIn,
    request: Request,
    service: UserService = Depends(get_service),
):
    try:
        user = service.register(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "code": "EMAIL_EXISTS"})

    #log in right after registration
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/login", response_model=UserOut)
def login(
    payload: LoginIn,
    request: Request,
    service: UserService = Depends(get_service),
):
    user = service.authenticate(payload.email, payload.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail={"message": "Invalid email or password", "code": "AUTH_FAILED"},
        )

    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/logout", response_model=MessageOut)
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
