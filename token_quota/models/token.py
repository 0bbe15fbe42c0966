"""Token model."""
from enum import IntEnum

from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from token_quota.common.database import Base


MAX_QUOTA = 2**63 - 1  # BigInteger upper bound
MAX_TOKEN_ID = 2**31 - 1  # Integer primary key upper bound
MIN_TIMESTAMP = -(2**63)
MAX_TIMESTAMP = 2**63 - 1


class TokenStatus(IntEnum):
    """API key status."""
    ENABLED = 1
    DISABLED = 2
    EXPIRED = 3
    EXHAUSTED = 4


class Token(Base):
    """API key with its quota state."""
    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String(48), nullable=False, unique=True, index=True)
    status = Column(Integer, nullable=False, default=TokenStatus.ENABLED)
    name = Column(String(100), nullable=False, index=True)
    created_time = Column(BigInteger, nullable=False)
    accessed_time = Column(BigInteger, nullable=False)
    expired_time = Column(BigInteger, nullable=False, default=-1)  # -1 means never expires
    remain_quota = Column(BigInteger, nullable=False, default=0)
    used_quota = Column(BigInteger, nullable=False, default=0)
    unlimited_quota = Column(Boolean, nullable=False, default=False)
    model_limits_enabled = Column(Boolean, nullable=False, default=False)
    model_limits = Column(String(1024), nullable=False, default="")
    allow_ips = Column(Text, nullable=True)
    group = Column(String(64), nullable=False, default="default")

    # Relationships
    user = relationship("User", back_populates="tokens")

    def __repr__(self):
        return f"<Token(id={self.id}, name={self.name}, user_id={self.user_id})>"
