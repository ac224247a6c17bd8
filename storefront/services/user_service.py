# storefront/services/user_service.py
from storefront.domain.entities import Role, User
from storefront.domain.schemas import RegisterIn, UserCreate
from storefront.repos.storage import Storage
from storefront.utils.security import hash_password, verify_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def register(self, payload: RegisterIn) -> User:
        if self.storage.get_user_by_email(payload.email):
            raise ValueError("Email already in use")

        user = self.storage.create_user(
            UserCreate(
                email=payload.email,
                password=hash_password(payload.password),
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=Role.CUSTOMER,
            )
        )
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User | None:
        user = self.storage.get_user_by_email(email)
        if not user or not verify_password(password, user.password):
            logger.info(f"Authentication failed for {email}")
            return None
        return user

    def get_user(self, user_id: int) -> User:
        user = self.storage.get_user(user_id)
        if not user:
            raise LookupError("User not found")
        return user
