from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from affiliate_ops.core.database import Base, generate_id


class Category(Base):
    """Flat tag grouping affiliate accounts (no hierarchy)."""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a category leaves its accounts uncategorised
    accounts = relationship("Account", back_populates="category")
