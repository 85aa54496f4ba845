"""Tests for the DynamoDB user store."""

from __future__ import annotations

import sys
from pathlib import Path
from uuid import UUID

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import EndpointConnectionError

from conftest import make_client_error
from userauth.exceptions import ConfigurationError
from userauth.exceptions import DatabaseError
from userauth.exceptions import ValidationError
from userauth.store.models import ProfileRef
from userauth.store.models import UserStatus
from userauth.store.user_store import UserStore


@pytest.fixture
def store(users_table) -> UserStore:
    return UserStore(users_table, 'EmailIndex')


class TestFindByEmail:
    def test_returns_none_when_no_profile(self, store, users_table) -> None:
        assert store.find_by_email('a@x.com') is None

    def test_queries_email_index_for_one_item(self, store, users_table) -> None:
        store.find_by_email('a@x.com')

        kwargs = users_table.query.call_args.kwargs
        assert kwargs['IndexName'] == 'EmailIndex'
        assert kwargs['Limit'] == 1
        assert kwargs['ExpressionAttributeNames'] == {'#status': 'status'}

    def test_returns_first_match(self, store, users_table) -> None:
        users_table.query.return_value = {
            'Items': [
                {'userId': 'user-1', 'status': 'PENDING'},
                {'userId': 'user-2', 'status': 'CONFIRMED'},
            ]
        }

        result = store.find_by_email('a@x.com')

        assert result == ProfileRef(user_id='user-1', status=UserStatus.PENDING)

    def test_rejects_empty_email(self, store, users_table) -> None:
        with pytest.raises(ValidationError):
            store.find_by_email('')
        users_table.query.assert_not_called()

    def test_wraps_client_errors(self, store, users_table) -> None:
        users_table.query.side_effect = make_client_error('ResourceNotFoundException', 'Query')

        with pytest.raises(DatabaseError):
            store.find_by_email('a@x.com')


class TestCreate:
    def test_writes_pending_profile(self, store, users_table) -> None:
        profile = store.create('a@x.com', 'Ada')

        assert profile.status is UserStatus.PENDING
        assert profile.email == 'a@x.com'
        assert profile.full_name == 'Ada'
        UUID(profile.user_id)

        item = users_table.put_item.call_args.kwargs['Item']
        assert item == {
            'userId': profile.user_id,
            'email': 'a@x.com',
            'fullName': 'Ada',
            'status': 'PENDING',
            'createdAt': profile.created_at,
        }

    def test_write_is_guarded_on_user_id(self, store, users_table) -> None:
        store.create('a@x.com', 'Ada')

        condition = users_table.put_item.call_args.kwargs['ConditionExpression']
        assert condition == Attr('userId').not_exists()

    def test_generates_fresh_ids(self, store) -> None:
        first = store.create('a@x.com', 'Ada')
        second = store.create('b@x.com', 'Bob')

        assert first.user_id != second.user_id

    def test_failed_guard_raises_database_error(self, store, users_table) -> None:
        users_table.put_item.side_effect = make_client_error(
            'ConditionalCheckFailedException', 'PutItem'
        )

        with pytest.raises(DatabaseError) as exc_info:
            store.create('a@x.com', 'Ada')

        assert exc_info.value.detail == 'ConditionalCheckFailedException'

    def test_transport_error_raises_database_error(self, store, users_table) -> None:
        users_table.put_item.side_effect = EndpointConnectionError(
            endpoint_url='https://dynamodb.us-east-1.amazonaws.com'
        )

        with pytest.raises(DatabaseError):
            store.create('a@x.com', 'Ada')

    def test_requires_email_and_name(self, store, users_table) -> None:
        with pytest.raises(ValidationError):
            store.create('a@x.com', '')
        users_table.put_item.assert_not_called()


class TestSetConfirmedByEmail:
    def test_noop_when_profile_missing(self, store, users_table) -> None:
        assert store.set_confirmed_by_email('a@x.com') is None
        users_table.update_item.assert_not_called()

    def test_sets_status_confirmed(self, store, users_table) -> None:
        users_table.query.return_value = {
            'Items': [{'userId': 'user-1', 'status': 'PENDING'}]
        }

        result = store.set_confirmed_by_email('a@x.com')

        assert result == ProfileRef(user_id='user-1', status=UserStatus.CONFIRMED)
        kwargs = users_table.update_item.call_args.kwargs
        assert kwargs['Key'] == {'userId': 'user-1'}
        assert kwargs['ExpressionAttributeValues'] == {':confirmed': 'CONFIRMED'}
        assert kwargs['ConditionExpression'] == Attr('userId').exists()

    def test_confirming_twice_stays_confirmed(self, store, users_table) -> None:
        users_table.query.return_value = {
            'Items': [{'userId': 'user-1', 'status': 'CONFIRMED'}]
        }

        result = store.set_confirmed_by_email('a@x.com')

        assert result.status is UserStatus.CONFIRMED

    def test_wraps_update_errors(self, store, users_table) -> None:
        users_table.query.return_value = {
            'Items': [{'userId': 'user-1', 'status': 'PENDING'}]
        }
        users_table.update_item.side_effect = make_client_error(
            'ConditionalCheckFailedException', 'UpdateItem'
        )

        with pytest.raises(DatabaseError):
            store.set_confirmed_by_email('a@x.com')


class TestFromSettings:
    def test_uses_configured_table_and_default_index(self, mocker) -> None:
        get_table = mocker.patch('userauth.store.user_store.get_dynamodb_table')

        store = UserStore.from_settings()

        get_table.assert_called_once_with('users-test', region_name='us-east-1')
        assert store._email_index == 'EmailIndex'

    def test_custom_email_index(self, mocker, monkeypatch) -> None:
        monkeypatch.setenv('USERS_EMAIL_INDEX', 'ByEmail')
        mocker.patch('userauth.store.user_store.get_dynamodb_table')

        assert UserStore.from_settings()._email_index == 'ByEmail'

    def test_requires_table_name(self, monkeypatch) -> None:
        monkeypatch.delenv('USERS_TABLE')

        with pytest.raises(ConfigurationError):
            UserStore.from_settings()
