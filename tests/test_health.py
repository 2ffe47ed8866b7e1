"""Tests for core.health: presentation status derived from monitor records."""
import pytest

from core.health import DEFAULT_WARNING_BAND, WarningBand, classify, classify_snapshot
from monitor.base import ServiceRecord, Snapshot
from tests.conftest import NOW, stamp


def _record(status="HEALTHY", seconds_ago=5.0, **kw):
    return ServiceRecord(status=status, last_heartbeat=stamp(seconds_ago), **kw)


class TestClassify:

    def test_recent_healthy(self, healthy_record):
        view = classify("service-a", healthy_record, NOW)
        assert view.name == "service-a"
        assert view.presentation_status == "HEALTHY"
        assert view.seconds_since_heartbeat == 5
        assert view.server_status == "HEALTHY"
        assert view.host == "localhost"
        assert view.port == 8081

    def test_deterministic(self, healthy_record):
        assert classify("a", healthy_record, NOW) == classify("a", healthy_record, NOW)

    @pytest.mark.parametrize("status", ["DEAD", "UNKNOWN", "healthy", ""])
    def test_non_healthy_status_is_dead_even_when_fresh(self, status):
        view = classify("a", _record(status=status, seconds_ago=0), NOW)
        assert view.presentation_status == "DEAD"

    def test_dead_in_warning_band_stays_dead(self):
        assert classify("a", _record(status="DEAD", seconds_ago=12), NOW).presentation_status == "DEAD"

    @pytest.mark.parametrize(
        "seconds_ago, expected",
        [
            (9, "HEALTHY"),
            (10, "WARNING"),
            (12, "WARNING"),
            (14.9, "WARNING"),
            (15, "HEALTHY"),
            (40, "HEALTHY"),
        ],
    )
    def test_warning_band(self, seconds_ago, expected):
        assert classify("a", _record(seconds_ago=seconds_ago), NOW).presentation_status == expected

    def test_missing_fields_fail_toward_dead(self):
        view = classify("ghost", ServiceRecord.from_raw({}), NOW)
        assert view.presentation_status == "DEAD"
        assert view.seconds_since_heartbeat == 0
        assert view.display_timestamp == NOW

    def test_clamped_age_is_healthy(self):
        view = classify("a", _record(seconds_ago=7300), NOW)
        assert view.seconds_since_heartbeat == 5
        assert view.presentation_status == "HEALTHY"

    def test_custom_band(self):
        band = WarningBand(start_s=30, end_s=45)
        assert classify("a", _record(seconds_ago=12), NOW, band=band).presentation_status == "HEALTHY"
        assert classify("a", _record(seconds_ago=31), NOW, band=band).presentation_status == "WARNING"


class TestWarningBand:

    def test_default_band(self):
        assert DEFAULT_WARNING_BAND == WarningBand(10, 15)
        assert 10 in DEFAULT_WARNING_BAND
        assert 15 not in DEFAULT_WARNING_BAND

    @pytest.mark.parametrize("start, end", [(-1, 5), (10, 10), (15, 10)])
    def test_invalid_band(self, start, end):
        with pytest.raises(ValueError):
            WarningBand(start, end)


class TestClassifySnapshot:

    def test_keeps_snapshot_order(self):
        snap = Snapshot(services={"b": _record(), "a": _record(status="DEAD"), "c": _record(seconds_ago=11)})
        views = classify_snapshot(snap, NOW)
        assert [v.name for v in views] == ["b", "a", "c"]
        assert [v.presentation_status for v in views] == ["HEALTHY", "DEAD", "WARNING"]

    def test_empty(self):
        assert classify_snapshot(Snapshot.empty(), NOW) == []

    def test_broken_record_becomes_dead(self):
        class Exploding:
            status = "HEALTHY"

            @property
            def last_heartbeat(self):
                raise RuntimeError("boom")

        snap = Snapshot(services={"ok": _record(), "bad": Exploding()})
        views = classify_snapshot(snap, NOW)
        assert [v.presentation_status for v in views] == ["HEALTHY", "DEAD"]
        assert views[1].server_status == "HEALTHY"
