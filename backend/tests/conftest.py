from __future__ import annotations

import base64
import time
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from jose import jwt
from starlette.testclient import TestClient

from evalboard.core.auth import jwks_cache
from evalboard.core.dependencies import get_current_user
from evalboard.core.periods import canonical_period
from evalboard.main import app
from evalboard.models.auth import UserInfo
from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation

TEST_TENANT_ID = "test-tenant-00000000-0000-0000-0000-000000000000"
TEST_CLIENT_ID = "test-client-00000000-0000-0000-0000-000000000000"
TEST_KID = "test-kid-1"

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


def _int_to_base64url(value: int) -> str:
    byte_length = (value.bit_length() + 7) // 8
    return base64.urlsafe_b64encode(value.to_bytes(byte_length, byteorder="big")).rstrip(b"=").decode("ascii")


def make_employee(
    employee_id: str = "e1",
    *,
    name: str = "Ahmed Hassan",
    national_id: str = "29001011234567",
    category: str = "doctor",
    **extra: Any,
) -> Employee:
    return Employee(id=employee_id, name=name, national_id=national_id, category=category, **extra)


def make_evaluation(
    evaluation_id: str,
    employee_id: str = "e1",
    *,
    criteria: dict[str, float] | None = None,
    date: datetime | None = None,
    period: Any = None,
    **extra: Any,
) -> Evaluation:
    return Evaluation(
        id=evaluation_id,
        employee_id=employee_id,
        criteria=criteria if criteria is not None else {"quality": 4, "efficiency": 4},
        date=date,
        period=period,
        period_key=canonical_period(period),
        **extra,
    )


def days_ago(days: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)


@pytest.fixture(autouse=True)
def _auth_settings():
    from evalboard.core.config import settings

    original_tenant = settings.AZURE_AD_TENANT_ID
    original_client = settings.AZURE_AD_CLIENT_ID
    settings.AZURE_AD_TENANT_ID = TEST_TENANT_ID
    settings.AZURE_AD_CLIENT_ID = TEST_CLIENT_ID
    jwks_cache.clear()
    yield
    settings.AZURE_AD_TENANT_ID = original_tenant
    settings.AZURE_AD_CLIENT_ID = original_client
    jwks_cache.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def rsa_test_keys():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")

    pub = private_key.public_key().public_numbers()
    jwk_dict = {
        "kty": "RSA",
        "kid": TEST_KID,
        "use": "sig",
        "alg": "RS256",
        "n": _int_to_base64url(pub.n),
        "e": _int_to_base64url(pub.e),
    }
    jwks_response = {"keys": [jwk_dict]}
    return private_pem, jwks_response


def _make_token(
    private_pem: str,
    *,
    oid: str = "test-oid-123",
    name: str = "Test User",
    email: str = "test@hospital.example",
    audience: str = TEST_CLIENT_ID,
    expired: bool = False,
) -> str:
    now = int(time.time())
    claims = {
        "oid": oid,
        "name": name,
        "preferred_username": email,
        "iss": f"https://login.microsoftonline.com/{TEST_TENANT_ID}/v2.0",
        "aud": audience,
        "exp": now - 3600 if expired else now + 3600,
        "iat": now - 60,
        "nbf": now - 60,
    }
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": TEST_KID})


@pytest.fixture
def mock_user():
    return UserInfo(id="evaluator-1", name="Evaluator User", email="evaluator@hospital.example")


@pytest.fixture
def authenticated_client(mock_user):
    app.dependency_overrides[get_current_user] = lambda: mock_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
