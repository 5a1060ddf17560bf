from sqlalchemy import Column, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from affiliate_ops.core.database import Base, generate_id
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    SUPERADMIN = "superadmin"


user_managed_accounts = Table(
    "user_managed_accounts",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("account_id", String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Team member. Sign-in lives with the external auth provider; this row only
    carries the directory data the incentive overview needs."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, default=UserRole.USER.value, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    managed_accounts = relationship("Account", secondary=user_managed_accounts, back_populates="managers")

    @property
    def managed_account_ids(self):
        return [account.id for account in self.managed_accounts]
