"""
Mediator Tests
==============

Tests for request dispatch and notification fan-out.
"""

from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from app.services.mediator import Mediator


@dataclass(frozen=True)
class Ping:
    value: int


@dataclass(frozen=True)
class Pinged:
    value: int


class TestSend:
    """Tests for Mediator.send."""

    @pytest.mark.asyncio
    async def test_dispatches_to_registered_handler(self):
        mediator = Mediator()
        handler = AsyncMock(return_value="pong")
        mediator.register(Ping, handler)

        result = await mediator.send(Ping(1))

        assert result == "pong"
        handler.assert_awaited_once_with(Ping(1))

    @pytest.mark.asyncio
    async def test_raises_when_no_handler_registered(self):
        with pytest.raises(LookupError):
            await Mediator().send(Ping(1))

    def test_rejects_second_handler_for_same_type(self):
        mediator = Mediator()
        mediator.register(Ping, AsyncMock())

        with pytest.raises(ValueError):
            mediator.register(Ping, AsyncMock())


class TestPublish:
    """Tests for Mediator.publish."""

    @pytest.mark.asyncio
    async def test_delivers_to_every_subscriber(self):
        mediator = Mediator()
        first, second = AsyncMock(), AsyncMock()
        mediator.subscribe(Pinged, first)
        mediator.subscribe(Pinged, second)

        await mediator.publish(Pinged(2))

        first.assert_awaited_once_with(Pinged(2))
        second.assert_awaited_once_with(Pinged(2))

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_stop_others(self):
        mediator = Mediator()
        failing = AsyncMock(side_effect=RuntimeError("smtp down"))
        healthy = AsyncMock()
        mediator.subscribe(Pinged, failing)
        mediator.subscribe(Pinged, healthy)

        await mediator.publish(Pinged(3))

        healthy.assert_awaited_once_with(Pinged(3))

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_is_noop(self):
        await Mediator().publish(Pinged(4))
