from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from affiliate_ops.core.database import Base, generate_id
import enum


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    VIOLATION = "violation"
    INACTIVE = "inactive"


class PaymentDataStatus(str, enum.Enum):
    # Advisory workflow, in the order accounts usually move through it
    BELUM_DIATUR = "belum diatur"
    UTAMAKAN = "utamakan"
    DIMASUKKAN = "dimasukkan"
    DISETUJUI = "disetujui"
    SAH = "sah"


class Account(Base):
    """Affiliate account whose daily metrics are uploaded as CSV"""
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Identity
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    account_code = Column(String, nullable=True, index=True)

    # Lifecycle
    status = Column(String, default=AccountStatus.ACTIVE.value, nullable=False, index=True)
    payment_data = Column(String, default=PaymentDataStatus.BELUM_DIATUR.value, nullable=False)

    # Grouping
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="accounts")
    sales_data = relationship("SalesData", back_populates="account", cascade="all, delete-orphan")
    managers = relationship("User", secondary="user_managed_accounts", back_populates="managed_accounts")
