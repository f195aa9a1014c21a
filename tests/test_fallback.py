"""Tests for the ordered model-tier fallback."""

import pytest
from unittest.mock import AsyncMock


class TestFirstSuccess:
    @pytest.mark.asyncio
    async def test_first_tier_wins(self):
        from tools.fallback import Strategy, first_success
        second = AsyncMock(return_value="b")
        outcome = await first_success([Strategy("pro", AsyncMock(return_value="a")), Strategy("flash", second)])
        assert outcome.ok
        assert outcome.value == "a"
        assert outcome.tier == "pro"
        assert outcome.attempts == 1
        second.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_on_error(self):
        from config.exceptions import LLMError
        from tools.fallback import Strategy, first_success
        outcome = await first_success([
            Strategy("pro", AsyncMock(side_effect=LLMError("overloaded"))),
            Strategy("flash", AsyncMock(return_value=["scene"])),
        ])
        assert outcome.value == ["scene"]
        assert outcome.tier == "flash"
        assert outcome.attempts == 2

    @pytest.mark.asyncio
    async def test_falls_back_on_rejected_value(self):
        from tools.fallback import Strategy, first_success
        outcome = await first_success([
            Strategy("pro", AsyncMock(return_value=[])),
            Strategy("flash", AsyncMock(return_value=["scene"])),
        ])
        assert outcome.tier == "flash"

    @pytest.mark.asyncio
    async def test_all_fail_returns_last_error(self):
        from config.exceptions import LLMError, LLMTimeoutError
        from tools.fallback import Strategy, first_success
        outcome = await first_success([
            Strategy("pro", AsyncMock(side_effect=LLMError("one"))),
            Strategy("flash", AsyncMock(side_effect=LLMTimeoutError("two"))),
        ])
        assert not outcome.ok
        assert isinstance(outcome.error, LLMTimeoutError)
        assert outcome.value is None

    @pytest.mark.asyncio
    async def test_empty_result_on_last_tier_is_error(self):
        from tools.fallback import EmptyResultError, Strategy, first_success
        outcome = await first_success([Strategy("flash", AsyncMock(return_value=""))])
        assert isinstance(outcome.error, EmptyResultError)

    @pytest.mark.asyncio
    async def test_credential_rejection_stops_chain(self):
        from config.exceptions import InvalidCredentialError
        from tools.fallback import Strategy, first_success
        second = AsyncMock(return_value="b")
        outcome = await first_success([
            Strategy("pro", AsyncMock(side_effect=InvalidCredentialError(status=403))),
            Strategy("flash", second),
        ])
        assert outcome.credential_rejected
        assert not outcome.ok
        second.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_accept(self):
        from tools.fallback import Strategy, first_success
        outcome = await first_success(
            [Strategy("flash", AsyncMock(return_value=""))],
            accept=lambda text: text is not None,
        )
        assert outcome.ok
        assert outcome.value == ""

    @pytest.mark.asyncio
    async def test_non_project_errors_propagate(self):
        from tools.fallback import Strategy, first_success
        with pytest.raises(KeyError):
            await first_success([Strategy("pro", AsyncMock(side_effect=KeyError("bug")))])
