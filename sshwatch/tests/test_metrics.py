"""Tests for Prometheus metrics — each decision path moves the right series."""

import time
from unittest.mock import patch

import requests
from prometheus_client import REGISTRY

from sshwatch.notify import WebhookNotifier
from sshwatch.pipeline import EventPipeline
from sshwatch.tracker import SubnetTracker


def _value(name, labels=None):
    """Current sample value; series that were never touched read as 0."""
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class _Notifier:
    def send(self, message):
        return True


class _Sink:
    def write(self, message):
        pass


class _Geo:
    def lookup(self, ip):
        return "Unknown"


def _failed(i):
    return f"sshd[{i}]: Failed password for root from 10.9.0.{i} port 22 ssh2"


def _pipeline(tracker=None):
    return EventPipeline(tracker or SubnetTracker(), _Notifier(), _Sink(), _Geo())


# ---------------------------------------------------------------------------
# Input counters
# ---------------------------------------------------------------------------

class TestInputMetrics:
    def test_every_line_is_counted(self):
        pipeline = _pipeline()
        before = _value("sshwatch_lines_total")
        pipeline.process("CRON[1]: job done")
        pipeline.process(_failed(1))
        assert _value("sshwatch_lines_total") - before == 2

    def test_events_by_outcome(self):
        pipeline = _pipeline()
        other = _value("sshwatch_events_total", {"outcome": "other-activity"})
        accepted = _value("sshwatch_events_total", {"outcome": "accepted"})

        pipeline.process(_failed(1))
        pipeline.process("sshd[2]: Accepted publickey for deploy from 10.9.1.2 port 22 ssh2")
        pipeline.process("sshd[3]: session opened for user alice")  # no address

        assert _value("sshwatch_events_total", {"outcome": "other-activity"}) - other == 1
        assert _value("sshwatch_events_total", {"outcome": "accepted"}) - accepted == 1


# ---------------------------------------------------------------------------
# Block scenario
# ---------------------------------------------------------------------------

class TestBlockMetrics:
    def setup_method(self):
        self.pipeline = _pipeline()
        for i in range(1, 6):
            self.pipeline.process(_failed(i))

    def test_sixth_line_blocks(self):
        blocks = _value("sshwatch_blocks_total")
        block_alerts = _value("sshwatch_alerts_total", {"kind": "block"})
        activity_alerts = _value("sshwatch_alerts_total", {"kind": "other-activity"})

        self.pipeline.process(_failed(6))

        assert _value("sshwatch_blocks_total") - blocks == 1
        assert _value("sshwatch_alerts_total", {"kind": "block"}) - block_alerts == 1
        assert _value("sshwatch_alerts_total", {"kind": "other-activity"}) - activity_alerts == 1
        assert _value("sshwatch_blocked_subnets") == 1

    def test_seventh_line_is_suppressed(self):
        self.pipeline.process(_failed(6))
        suppressed = _value("sshwatch_suppressed_total")
        blocks = _value("sshwatch_blocks_total")
        block_alerts = _value("sshwatch_alerts_total", {"kind": "block"})

        self.pipeline.process(_failed(7))

        assert _value("sshwatch_suppressed_total") - suppressed == 1
        assert _value("sshwatch_blocks_total") == blocks
        assert _value("sshwatch_alerts_total", {"kind": "block"}) == block_alerts


# ---------------------------------------------------------------------------
# Window resets
# ---------------------------------------------------------------------------

class TestResetMetrics:
    def test_reset_is_counted_once(self):
        now = time.time()
        with patch("sshwatch.tracker.time") as mock_time:
            mock_time.time.return_value = now
            pipeline = _pipeline()
            before = _value("sshwatch_window_resets_total")

            pipeline.process(_failed(1))
            assert _value("sshwatch_window_resets_total") == before

            mock_time.time.return_value = now + 60
            pipeline.process("CRON[1]: job done")
            pipeline.process("CRON[2]: job done")
        assert _value("sshwatch_window_resets_total") - before == 1


# ---------------------------------------------------------------------------
# Delivery failures
# ---------------------------------------------------------------------------

class TestDeliveryMetrics:
    def test_failed_send_is_counted(self):
        notifier = WebhookNotifier("https://hooks.example.test/abc")
        before = _value("sshwatch_alert_failures_total")
        with patch.object(notifier._session, "post",
                          side_effect=requests.ConnectionError("refused")):
            assert notifier.send("hello") is False
        assert _value("sshwatch_alert_failures_total") - before == 1

    def test_successful_send_is_not_counted(self):
        notifier = WebhookNotifier("https://hooks.example.test/abc")
        before = _value("sshwatch_alert_failures_total")
        with patch.object(notifier._session, "post"):
            assert notifier.send("hello") is True
        assert _value("sshwatch_alert_failures_total") == before
