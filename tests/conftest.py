# tests/conftest.py

import pytest
from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from reward_tiers.db import Base, get_db
from reward_tiers.main import app
from reward_tiers.models.customer import Customer
from reward_tiers.models.data_version import DataVersion
from reward_tiers.models.reward import Reward


BRAND = "acme"
OTHER_BRAND = "globex"


@pytest.fixture
def test_engine():
    """In-memory SQLite shared by every session of a single test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def brand_headers():
    return {"X-Brand": BRAND}


def add_reward(db, code, description, discount, brand=BRAND, minimum_purchase="0", modified=None):
    """Insert a reward row directly, bypassing the repository"""
    reward = Reward(
        brand=brand,
        code=code,
        description=description,
        discount_percentage=Decimal(str(discount)),
        minimum_purchase=Decimal(minimum_purchase),
        last_modified_date=modified or date.today() - timedelta(days=30),
    )
    db.add(reward)
    db.commit()
    return reward


def add_customer(db, profile_id, reward_code=None, status="ACTIVE", brand=BRAND):
    customer = Customer(brand=brand, profile_id=profile_id, status=status, reward_code=reward_code)
    db.add(customer)
    db.commit()
    return customer


@pytest.fixture
def v1_catalog(db_session):
    """Version 1 catalog as written by an earlier release"""
    add_reward(db_session, "GOLD", "Gold Level", 20)
    add_reward(db_session, "SILVER", "Silver Level", 10)
    add_reward(db_session, "BRONZE", "Bronze Level", 5, minimum_purchase="25.00")
    db_session.add(DataVersion(brand=BRAND, version=1))
    db_session.commit()
    return db_session
