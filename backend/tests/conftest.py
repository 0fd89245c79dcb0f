import os
import sys
import uuid
from pathlib import Path

import pytest

# Ensure project root is on sys.path for `import underwriting` and `import main`
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Force SQLite for tests
test_db_path = ROOT / "test_run.db"
if test_db_path.exists():
    test_db_path.unlink()

os.environ.setdefault("DATABASE_URL", f"sqlite:///{test_db_path}")
os.environ.setdefault("AUTO_CREATE_TABLES", "1")

# Create tables if needed
from underwriting.db.database import engine, Base, SessionLocal
import underwriting.models.models  # noqa: F401 ensures models are registered
from underwriting.services.config_service import get_config_cache

Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def clear_config_cache():
    get_config_cache().clear_all()
    yield
    get_config_cache().clear_all()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def insurer_id():
    """A fresh insurer per test keeps stored rows from leaking between tests."""
    return f"insurer-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def strong_profile():
    return {
        "fullName": "Amira Ben Salah",
        "age": 35,
        "maritalStatus": "Married",
        "numberOfDependents": 1,
        "employmentType": "Permanent",
        "monthlyNetSalary": 4000,
        "employmentYears": 8,
        "monthlyDebtPayments": 200,
        "savingsBalance": 15000,
        "otherObligations": 100,
        "rentAmount": 1000,
        "hasGuarantor": True,
        "guarantorLocation": "Tunisia",
        "monthsAtResidence": 48,
        "numberOfPastDefaults": 0,
        "landlordReferences": [{"name": "Previous landlord", "rating": "Positive"}],
        "utilityPaymentHistory": "Always",
        "healthStatus": "Good",
        "verifiedId": True,
    }
