from sqlalchemy import Column, Integer, String

from storefront.data.database import Base, UTCDateTime


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    role = Column(String(20), nullable=False, default="customer")  # admin, customer
    created_at = Column(UTCDateTime, nullable=False)
