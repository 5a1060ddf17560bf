from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from affiliate_ops.core.database import Base, get_db
from affiliate_ops.main import app
from affiliate_ops.models import Account, Category, IncentiveRule, IncentiveTier, SalesData, User


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def category(db):
    category = Category(name="Fashion", description="Fashion affiliates")
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def make_account(db):
    def _make(username, **kwargs):
        account = Account(username=username, **kwargs)
        db.add(account)
        db.commit()
        return account
    return _make


@pytest.fixture
def make_user(db):
    def _make(name, accounts=(), role="user"):
        user = User(name=name, email=f"{name.lower()}@test.com", role=role)
        user.managed_accounts = list(accounts)
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def add_sales(db):
    def _add(account, day, commission, revenue, clicks=0, orders=0, products_sold=0, new_buyers=0):
        row = SalesData(
            account_id=account.id,
            date=day,
            gross_commission=Decimal(str(commission)),
            total_purchases=Decimal(str(revenue)),
            clicks=clicks,
            orders=orders,
            products_sold=products_sold,
            new_buyers=new_buyers,
        )
        db.add(row)
        db.commit()
        return row
    return _add


@pytest.fixture
def standard_rule(db):
    """5-7.99% band, 50k per-account floor, 80M base, tiers 80M@0.4 / 90M@0.6."""
    rule = IncentiveRule(
        name="Standard",
        min_commission_threshold=Decimal("50000"),
        commission_rate_min=Decimal("5"),
        commission_rate_max=Decimal("7.99"),
        base_revenue_threshold=Decimal("80000000"),
        is_active=True,
    )
    rule.tiers = [
        IncentiveTier(revenue_threshold=Decimal("90000000"), incentive_rate=Decimal("0.6")),
        IncentiveTier(revenue_threshold=Decimal("80000000"), incentive_rate=Decimal("0.4")),
    ]
    db.add(rule)
    db.commit()
    return rule


@pytest.fixture
def may_2024():
    return date(2024, 5, 15)
