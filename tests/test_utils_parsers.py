"""Tests for utility parser functions."""

from __future__ import annotations

import base64
import json
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from userauth.exceptions import ValidationError
from userauth.utils.parsers import parse_json_body
from userauth.utils.parsers import require_fields


class TestParseJsonBody:
    """Tests for parse_json_body function."""

    def test_returns_empty_dict_without_body(self) -> None:
        assert parse_json_body({}) == {}
        assert parse_json_body({'body': None}) == {}
        assert parse_json_body({'body': ''}) == {}

    def test_parses_string_body(self) -> None:
        assert parse_json_body({'body': '{"email": "a@x.com"}'}) == {'email': 'a@x.com'}

    def test_accepts_decoded_mapping(self) -> None:
        assert parse_json_body({'body': {'email': 'a@x.com'}}) == {'email': 'a@x.com'}

    def test_decodes_base64_body(self) -> None:
        encoded = base64.b64encode(json.dumps({'accessToken': 't'}).encode()).decode()

        result = parse_json_body({'body': encoded, 'isBase64Encoded': True})

        assert result == {'accessToken': 't'}

    def test_raises_for_invalid_json(self) -> None:
        with pytest.raises(ValidationError):
            parse_json_body({'body': '{broken'})

    def test_raises_for_non_object(self) -> None:
        with pytest.raises(ValidationError):
            parse_json_body({'body': '["a@x.com"]'})


class TestRequireFields:
    """Tests for require_fields function."""

    def test_returns_values_in_order(self) -> None:
        body = {'password': 'p', 'email': 'e'}
        assert require_fields(body, ('email', 'password')) == ['e', 'p']

    def test_single_field_message(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_fields({}, ('accessToken',))
        assert exc_info.value.message == 'accessToken is required'

    def test_three_field_message_names_all_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_fields({'email': 'e'}, ('email', 'password', 'fullName'))
        assert exc_info.value.message == 'email, password and fullName are required'
        assert exc_info.value.field == 'password,fullName'

    @pytest.mark.parametrize('value', ['', None, 42, ['a']])
    def test_rejects_empty_or_non_string(self, value) -> None:
        with pytest.raises(ValidationError):
            require_fields({'email': value}, ('email',))
