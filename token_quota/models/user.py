"""User model."""
from enum import IntEnum

from sqlalchemy import Column, Integer, BigInteger, String
from sqlalchemy.orm import relationship

from token_quota.common.database import Base
from token_quota.common.time_utils import get_timestamp


class UserRole(IntEnum):
    """User roles (higher value includes lower)."""
    COMMON = 1
    ADMIN = 10
    ROOT = 100


class UserStatus(IntEnum):
    """User account status."""
    ENABLED = 1
    DISABLED = 2


class User(Base):
    """Account that owns tokens and authenticates with username/password."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(50), nullable=False, default="")
    role = Column(Integer, nullable=False, default=UserRole.COMMON)
    status = Column(Integer, nullable=False, default=UserStatus.ENABLED)
    created_time = Column(BigInteger, nullable=False, default=get_timestamp)

    # Relationships
    tokens = relationship("Token", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_enabled(self) -> bool:
        return self.status == UserStatus.ENABLED

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
