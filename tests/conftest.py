"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- A controllable clock
- Redis (fakeredis) and the OTP store
- JWT handling and the user directory
- Services and the API client
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import fakeredis
import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["JWT_SECRET"] = "test_jwt_secret_key_for_testing_only_32bytes!"

from otp_auth.auth import JWTHandler, UserStore, User
from otp_auth.config import Config, JWTConfig, TwilioConfig
from otp_auth.otp import RateLimiter, RedisOTPStore
from otp_auth.services import AuthService, SMSService, UserService, create_services


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "jwt_secret": "test_jwt_secret_key_for_testing_only_32bytes!",
        "test_phone": "+1234567890",
        "other_phone": "+1987654321",
    }


class FakeClock:
    """Manually advanced timezone-aware clock."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float):
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


# =============================================================================
# OTP Fixtures
# =============================================================================

@pytest.fixture
def fake_redis():
    """In-process Redis double."""
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def rate_limiter(fake_redis) -> RateLimiter:
    return RateLimiter(fake_redis)


@pytest.fixture
def otp_store(fake_redis, rate_limiter, clock) -> RedisOTPStore:
    """OTP store on fakeredis with a controllable clock."""
    return RedisOTPStore(fake_redis, rate_limiter=rate_limiter, clock=clock)


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def jwt_handler(test_config) -> JWTHandler:
    """Create a JWTHandler with test secret."""
    return JWTHandler(secret_key=test_config["jwt_secret"])


@pytest.fixture
def valid_token(jwt_handler, test_config) -> str:
    return jwt_handler.issue(user_id="test-user-id-123", phone_number=test_config["test_phone"])


@pytest.fixture
def user_store() -> UserStore:
    return UserStore()


@pytest.fixture
def sample_user(user_store, test_config) -> User:
    """Create a sample user in the store."""
    return user_store.create(User.new(test_config["test_phone"]))


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def sms_service() -> SMSService:
    """SMS service without Twilio credentials (logs codes)."""
    return SMSService(TwilioConfig(account_sid=None, auth_token=None, from_number=None))


@pytest.fixture
def mock_sms() -> MagicMock:
    sms = MagicMock(spec=SMSService)
    sms.send_otp.return_value = {"success": True, "channel": "log"}
    return sms


@pytest.fixture
def auth_service(otp_store, user_store, jwt_handler, mock_sms, clock) -> AuthService:
    return AuthService(otp_store, user_store, jwt_handler, sms=mock_sms, clock=clock)


@pytest.fixture
def user_service(user_store) -> UserService:
    return UserService(user_store)


@pytest.fixture
def services(fake_redis, test_config):
    """Fully wired services on fakeredis."""
    config = Config(
        jwt=JWTConfig(secret_key=test_config["jwt_secret"], expire_hours=24),
        twilio=TwilioConfig(account_sid=None, auth_token=None, from_number=None)
    )
    return create_services(config, redis_client=fake_redis)


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_app(services):
    """Create FastAPI app for testing."""
    from api.main import create_app
    return create_app(services)


@pytest.fixture
def api_client(api_app) -> TestClient:
    """Create synchronous test client for API."""
    return TestClient(api_app)


@pytest.fixture
def registered_user(services, test_config) -> User:
    return services.users.create(User.new(test_config["other_phone"]))


@pytest.fixture
def auth_headers(services, registered_user) -> dict:
    token = services.jwt.issue(registered_user.id, registered_user.phone_number)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def authenticated_client(api_client, auth_headers) -> TestClient:
    """Create authenticated test client."""
    api_client.headers.update(auth_headers)
    return api_client


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
