"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from loansewa_web.api.main import create_app
from loansewa_web.infrastructure.clients.schemas import Identity, LoanApplication


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client with a fresh cookie jar"""
    return TestClient(create_app())


@pytest.fixture
def borrower() -> Identity:
    return Identity(
        id="u-1",
        full_name="Asha Verma",
        email="asha@example.com",
        mobile_number="9876543210",
        aadhar="123412341234",
    )


@pytest.fixture
def admin_identity() -> Identity:
    return Identity(id="a-1", full_name="Ravi Admin", email="ravi@loansewa.in", mobile_number="9000000000")


@pytest.fixture
def user_client(client: TestClient, borrower: Identity) -> TestClient:
    """Test client signed in as a borrower"""
    with patch(
        "loansewa_web.infrastructure.clients.backend.LoanSewaClient.login",
        new=AsyncMock(return_value=borrower),
    ):
        response = client.post(
            "/login",
            data={"identifier": "9876543210", "password": "secret"},
            follow_redirects=False,
        )
    assert response.status_code == 303
    return client


@pytest.fixture
def admin_client(client: TestClient, admin_identity: Identity) -> TestClient:
    """Test client signed in as an admin"""
    with patch(
        "loansewa_web.infrastructure.clients.backend.LoanSewaClient.admin_login",
        new=AsyncMock(return_value=admin_identity),
    ):
        response = client.post(
            "/admin/login",
            data={"email": "ravi@loansewa.in", "password": "secret"},
            follow_redirects=False,
        )
    assert response.status_code == 303
    return client


def make_application(
    app_id: str,
    score: int,
    days_ago: int = 0,
    loan_amount: float = 1_000_000,
    status: str = "Pending",
    **extra,
) -> LoanApplication:
    return LoanApplication(
        id=app_id,
        user_id="u-1",
        credit_score=score,
        loan_amount=loan_amount,
        status=status,
        created_at=datetime.now() - timedelta(days=days_ago),
        **extra,
    )


@pytest.fixture
def sample_applications() -> list[LoanApplication]:
    """Application history for one borrower, newest first"""
    return [
        make_application("app-3", 720, days_ago=2, loan_amount=2_560_000, rating="Good", status="Approved",
                         default_probability=0.08, credit_utilization_ratio=30),
        make_application("app-2", 680, days_ago=40, loan_amount=1_500_000, rating="Good", status="Rejected"),
        make_application("app-1", 610, days_ago=95, loan_amount=800_000, rating="Fair", status="Approved"),
    ]


@pytest.fixture
def application_factory():
    """Build LoanApplication records relative to now"""
    return make_application
