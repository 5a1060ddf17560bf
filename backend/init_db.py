"""
Database initialization script
Run this to create tables and seed initial data
"""
from decimal import Decimal

from affiliate_ops.core.database import engine, Base, SessionLocal
from affiliate_ops.models import Category, IncentiveRule, IncentiveTier, User, UserRole


DEFAULT_RULES = [
    {
        "name": "Standard 5-8%",
        "description": "Blended commission rate between 5% and 7.99%",
        "min_commission_threshold": Decimal("50000"),
        "commission_rate_min": Decimal("5"),
        "commission_rate_max": Decimal("7.99"),
        "base_revenue_threshold": Decimal("80000000"),
        "priority": 0,
        "tiers": [
            {"revenue_threshold": Decimal("80000000"), "incentive_rate": Decimal("0.4")},
            {"revenue_threshold": Decimal("90000000"), "incentive_rate": Decimal("0.6")},
            {"revenue_threshold": Decimal("100000000"), "incentive_rate": Decimal("0.8")},
        ],
    },
    {
        "name": "High rate 8%+",
        "description": "Blended commission rate of 8% and above",
        "min_commission_threshold": Decimal("50000"),
        "commission_rate_min": Decimal("8"),
        "commission_rate_max": Decimal("100"),
        "base_revenue_threshold": Decimal("50000000"),
        "priority": 1,
        "tiers": [
            {"revenue_threshold": Decimal("50000000"), "incentive_rate": Decimal("0.5")},
            {"revenue_threshold": Decimal("75000000"), "incentive_rate": Decimal("0.75")},
        ],
    },
]


def init_db():
    """Initialize database with tables"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_data(db=None):
    """Seed initial data"""
    owns_session = db is None
    db = db or SessionLocal()

    try:
        print("\nSeeding initial data...")

        admin = db.query(User).filter(User.email == "admin@affiliate.local").first()
        if not admin:
            db.add(User(name="Administrator", email="admin@affiliate.local", role=UserRole.SUPERADMIN.value))
            print("✓ Superadmin created (admin@affiliate.local)")

        if not db.query(Category).filter(Category.name == "Belum Diatur").first():
            db.add(Category(name="Belum Diatur", description="Accounts not yet categorised"))
            print("✓ Default category created")

        for rule_data in DEFAULT_RULES:
            if db.query(IncentiveRule).filter(IncentiveRule.name == rule_data["name"]).first():
                continue
            data = dict(rule_data)
            tiers = data.pop("tiers")
            rule = IncentiveRule(**data)
            rule.tiers = [IncentiveTier(**tier) for tier in tiers]
            db.add(rule)
            print(f"✓ Created rule {rule_data['name']}")

        db.commit()
        print("\n✓ Database seeded successfully!")

    except Exception as e:
        print(f"\n✗ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Affiliate Ops - Database Initialization")
    print("=" * 60)

    init_db()
    seed_data()

    print("\n" + "=" * 60)
    print("Initialization complete!")
    print("=" * 60)
    print("\nYou can now access:")
    print("  - API: http://localhost:8000")
    print("  - API Docs: http://localhost:8000/docs")
    print("=" * 60)
