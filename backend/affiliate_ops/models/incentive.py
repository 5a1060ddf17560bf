from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Boolean, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from affiliate_ops.core.database import Base, generate_id


class IncentiveRule(Base):
    """Commission-rate band with its revenue tier ladder"""
    __tablename__ = "incentive_rules"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Per-account commission floor for an account to count toward revenue
    min_commission_threshold = Column(Numeric(14, 2), default=0, nullable=False)

    # Blended commission rate band, in percent. A max of 100 means unbounded.
    commission_rate_min = Column(Numeric(7, 4), default=0, nullable=False)
    commission_rate_max = Column(Numeric(7, 4), default=100, nullable=False)

    # Qualifying revenue needed before any tier unlocks
    base_revenue_threshold = Column(Numeric(16, 2), default=0, nullable=False)

    # Lower values are matched first when rate bands overlap
    priority = Column(Integer, default=0, nullable=False)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tiers = relationship(
        "IncentiveTier",
        back_populates="rule",
        cascade="all, delete-orphan",
        order_by="IncentiveTier.revenue_threshold",
    )


class IncentiveTier(Base):
    __tablename__ = "incentive_tiers"

    id = Column(String(36), primary_key=True, default=generate_id)
    rule_id = Column(String(36), ForeignKey("incentive_rules.id", ondelete="CASCADE"), nullable=False, index=True)

    revenue_threshold = Column(Numeric(16, 2), nullable=False)
    incentive_rate = Column(Numeric(7, 4), nullable=False)  # percent of qualifying revenue, e.g. 0.4

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    rule = relationship("IncentiveRule", back_populates="tiers")
