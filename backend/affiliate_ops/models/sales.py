from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from affiliate_ops.core.database import Base, generate_id


class SalesData(Base):
    """One account's affiliate metrics for one calendar day.

    (account_id, date) is unique: re-uploading a day replaces the row.
    """
    __tablename__ = "sales_data"
    __table_args__ = (
        UniqueConstraint("account_id", "date", name="uq_sales_data_account_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    # Daily metrics
    clicks = Column(Integer, default=0, nullable=False)
    orders = Column(Integer, default=0, nullable=False)
    gross_commission = Column(Numeric(14, 2), default=0, nullable=False)
    products_sold = Column(Integer, default=0, nullable=False)
    total_purchases = Column(Numeric(16, 2), default=0, nullable=False)
    new_buyers = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    account = relationship("Account", back_populates="sales_data")
