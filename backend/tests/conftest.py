import itertools
import os
from datetime import date

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from splitledger.database import Base, get_db
from splitledger.main import app
from splitledger.schemas import Expense

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_expense():
    ids = itertools.count(1)

    def _make(
        amount,
        paid_by="A",
        participants=("A", "B"),
        share_type="EQUAL",
        shares=None,
        category="other",
        day=date(2024, 1, 15),
        id=None,
    ):
        return Expense(
            id=next(ids) if id is None else id,
            amount=amount,
            paid_by=paid_by,
            participants=tuple(participants),
            share_type=share_type,
            custom_shares=[{"person": p, "value": v} for p, v in (shares or {}).items()],
            category=category,
            date=day,
        )

    return _make


@pytest.fixture
def post_expense(client):
    def _post(amount, paid_by="A", participants=("A", "B"), **extra):
        body = {"amount": amount, "paid_by": paid_by, "participants": list(participants)}
        body.update(extra)
        res = client.post("/api/expenses", json=body)
        assert res.status_code == 200, res.text
        return res.json()

    return _post
