"""Unit tests for caller identity resolution."""

from unittest.mock import patch

import pytest
from fastapi import HTTPException

from rento.core.auth import CurrentUser, get_current_user, parse_api_keys, resolve_api_key
from rento.core.errors import AuthenticationAppError


class TestParseAPIKeys:
    """Test ``key:user_id`` parsing."""

    def test_parse_pairs(self) -> None:
        assert parse_api_keys("k1:user-1,k2:user-2") == {"k1": "user-1", "k2": "user-2"}

    def test_parse_trims_whitespace(self) -> None:
        assert parse_api_keys(" k1 : user-1 ,  k2:user-2 ") == {"k1": "user-1", "k2": "user-2"}

    @pytest.mark.parametrize("raw", [None, "", "   ,  ,  "])
    def test_parse_empty_inputs(self, raw) -> None:
        assert parse_api_keys(raw) == {}

    def test_parse_skips_entries_without_user(self) -> None:
        assert parse_api_keys("lonely-key,k2:,:user-3,k4:user-4") == {"k4": "user-4"}

    def test_later_entries_win(self) -> None:
        assert parse_api_keys("k1:a,k1:b") == {"k1": "b"}


class TestResolveAPIKey:
    @patch("rento.core.auth.settings")
    def test_resolves_known_key(self, mock_settings) -> None:
        mock_settings.app.api_keys = "valid-key:user-9"

        assert resolve_api_key("valid-key") == CurrentUser(id="user-9")

    @patch("rento.core.auth.settings")
    def test_raises_when_no_keys_configured(self, mock_settings) -> None:
        mock_settings.app.api_keys = None

        with pytest.raises(AuthenticationAppError) as exc_info:
            resolve_api_key("some-key")

        assert exc_info.value.code == "api_keys_not_configured"

    @patch("rento.core.auth.settings")
    def test_rejects_unknown_key(self, mock_settings) -> None:
        mock_settings.app.api_keys = "valid-key:user-9"

        with pytest.raises(AuthenticationAppError) as exc_info:
            resolve_api_key("wrong")

        assert exc_info.value.code == "invalid_api_key"
        assert exc_info.value.message == "Invalid API key"


class TestGetCurrentUserDependency:
    @pytest.mark.asyncio
    @patch("rento.core.auth.settings")
    async def test_missing_key_is_401(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key:user-9"

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(x_api_key=None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Authentication required"

    @pytest.mark.asyncio
    @patch("rento.core.auth.settings")
    async def test_invalid_key_is_401(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key:user-9"

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(x_api_key="nope")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid API key"

    @pytest.mark.asyncio
    @patch("rento.core.auth.settings")
    async def test_valid_key_returns_user(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "valid-key:user-9"

        user = await get_current_user(x_api_key="valid-key", x_user_id="spoofed")

        assert user.id == "user-9"

    @pytest.mark.asyncio
    @patch("rento.core.auth.settings")
    async def test_user_header_trusted_when_keys_not_required(self, mock_settings) -> None:
        mock_settings.app.api_key_required = False

        user = await get_current_user(x_api_key=None, x_user_id="dev-user")

        assert user == CurrentUser(id="dev-user")

    @pytest.mark.asyncio
    @patch("rento.core.auth.settings")
    async def test_missing_user_header_is_401_when_keys_not_required(self, mock_settings) -> None:
        mock_settings.app.api_key_required = False

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(x_api_key=None, x_user_id=None)

        assert exc_info.value.status_code == 401
