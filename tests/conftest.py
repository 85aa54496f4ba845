"""Pytest configuration and fixtures for backend tests.

Provides API Gateway event factories, a stubbed Cognito client and mock
collaborators for the auth handlers.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


# --- Environment Fixtures ---


@pytest.fixture(autouse=True)
def auth_env(monkeypatch) -> dict[str, str]:
    """Configure the environment the auth handlers expect."""
    values = {
        'region': 'us-east-1',
        'CLIENT_ID': 'test-client-id',
        'USERS_TABLE': 'users-test',
        'USER_POOL_ID': 'us-east-1_TestPool',
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv('USERS_EMAIL_INDEX', raising=False)
    monkeypatch.delenv('CORS_ALLOWED_ORIGINS', raising=False)
    return values


@pytest.fixture(autouse=True)
def clear_boto_clients():
    """Drop cached boto3 clients between tests."""
    from userauth.services.aws_clients import clear_client_cache

    clear_client_cache()
    yield
    clear_client_cache()


# --- AWS Fixtures ---


@pytest.fixture
def cognito_client():
    """A real cognito-idp client with no network access."""
    import boto3

    return boto3.client(
        'cognito-idp',
        region_name='us-east-1',
        aws_access_key_id='testing',
        aws_secret_access_key='testing',
    )


@pytest.fixture
def cognito_stubber(cognito_client):
    """Stubber bound to ``cognito_client``; asserts every stub was used."""
    from botocore.stub import Stubber

    with Stubber(cognito_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def users_table(mocker):
    """Mock DynamoDB Table resource."""
    table = mocker.MagicMock(name='users_table')
    table.query.return_value = {'Items': []}
    table.put_item.return_value = {}
    table.update_item.return_value = {}
    return table


def make_client_error(code: str, operation: str = 'Operation'):
    """Build a botocore ClientError with the given error code."""
    from botocore.exceptions import ClientError

    return ClientError(
        {'Error': {'Code': code, 'Message': f'{code} raised in test'}},
        operation,
    )


# --- Collaborator Fixtures ---


@pytest.fixture
def sample_profile():
    from userauth.store.models import UserProfile
    from userauth.store.models import UserStatus

    return UserProfile(
        user_id=str(uuid4()),
        email='a@x.com',
        full_name='Ada',
        status=UserStatus.PENDING,
        created_at='2026-01-01T00:00:00+00:00',
    )


@pytest.fixture
def identity_provider(mocker):
    """Mock identity provider that accepts every call."""
    from userauth.identity.cognito import AuthTokens
    from userauth.identity.cognito import Registration

    provider = mocker.MagicMock(name='identity_provider')
    provider.can_delete_users = True
    provider.sign_up.return_value = Registration(user_confirmed=False, user_sub='sub-123')
    provider.initiate_auth.return_value = AuthTokens(
        access_token='access-token',
        id_token='id-token',
        refresh_token='refresh-token',
        expires_in=3600,
        token_type='Bearer',
    )
    provider.confirm_sign_up.return_value = None
    provider.global_sign_out.return_value = None
    provider.admin_delete_user.return_value = None
    return provider


@pytest.fixture
def user_store(mocker, sample_profile):
    """Mock user store with no existing profiles."""
    store = mocker.MagicMock(name='user_store')
    store.find_by_email.return_value = None
    store.create.return_value = sample_profile
    store.set_confirmed_by_email.return_value = None
    return store


@pytest.fixture
def auth_service(mocker, identity_provider, user_store):
    """Patch the handlers to use the mock collaborators."""
    from userauth.api import auth
    from userauth.api.auth import AuthService

    service = AuthService(identity_provider=identity_provider, user_store=user_store)
    mocker.patch.object(auth, 'build_service', return_value=service)
    return service


# --- API Event Fixtures ---


@pytest.fixture
def make_event() -> Callable[..., dict]:
    """Factory for API Gateway POST events with a JSON body."""

    def _make(
        body: Any = None,
        path: str = '/v1/auth/sign-up',
        headers: Optional[dict[str, str]] = None,
        raw_body: Optional[str] = None,
    ) -> dict:
        return {
            'httpMethod': 'POST',
            'path': path,
            'headers': {'Content-Type': 'application/json'} if headers is None else headers,
            'requestContext': {'requestId': str(uuid4())},
            'body': raw_body if raw_body is not None else (
                json.dumps(body) if body is not None else None
            ),
            'isBase64Encoded': False,
        }

    return _make


def response_body(response: dict) -> dict:
    """Decode the JSON body of a handler response."""
    return json.loads(response['body'])
