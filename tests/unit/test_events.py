"""Unit tests for event buffering and the logging sink."""
from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from synth_engine.events import EventDispatcher, LoggingEventSink
from synth_engine.models import CollateralDeposited, CollateralRedeemed, DebtIssued
from synth_engine.testing import RecordingEventSink


class TestEventDispatcher:
    def test_publishes_on_success(self) -> None:
        sink = RecordingEventSink()
        dispatcher = EventDispatcher([sink])
        event = DebtIssued("0xU", 5)
        with dispatcher.buffer():
            dispatcher.emit(event)
            assert sink.events == []
        assert sink.events == [event]

    def test_discards_on_failure(self) -> None:
        sink = RecordingEventSink()
        dispatcher = EventDispatcher([sink])
        with pytest.raises(RuntimeError):
            with dispatcher.buffer():
                dispatcher.emit(DebtIssued("0xU", 5))
                raise RuntimeError("boom")
        assert sink.events == []

    def test_emit_outside_buffer(self) -> None:
        with pytest.raises(RuntimeError):
            EventDispatcher().emit(DebtIssued("0xU", 5))

    def test_failing_sink_does_not_block_others(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        broken = MagicMock()
        broken.publish.side_effect = ConnectionError("down")
        sink = RecordingEventSink()
        dispatcher = EventDispatcher([broken])
        dispatcher.add_sink(sink)

        with caplog.at_level(logging.ERROR):
            with dispatcher.buffer():
                dispatcher.emit(DebtIssued("0xU", 5))

        assert len(sink.events) == 1
        assert "failed" in caplog.text


class TestLoggingEventSink:
    def test_logs_deposit(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            LoggingEventSink().publish(CollateralDeposited("0xU", "0xWETH", 7))
        assert "deposited" in caplog.text
        assert "0xWETH" in caplog.text

    def test_distinguishes_liquidation(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            LoggingEventSink().publish(CollateralRedeemed("0xU", "0xU", "0xWETH", 1))
            LoggingEventSink().publish(CollateralRedeemed("0xU", "0xL", "0xWETH", 1))
        assert "redeemed" in caplog.records[0].getMessage()
        assert "liquidated" in caplog.records[1].getMessage()
