"""
Unit tests for email open tracking.
"""

from presse_leads.tracking import TRANSPARENT_PIXEL, TrackingStore


class TestTrackingStore:
    def test_create_record(self):
        store = TrackingStore("http://track.test/")
        record = store.create_record("opp-1", "jean@lefigaro.fr", "followup", now_ms=42)

        assert record.tracking_id == "trk_opp-1_followup_42"
        assert record.email_type == "followup"
        assert record.sent_at
        assert store.pixel_url(record.tracking_id) == "http://track.test/api/track/trk_opp-1_followup_42"
        assert 'width="1" height="1"' in store.pixel_html(record.tracking_id)

    def test_default_email_type(self):
        record = TrackingStore("http://t").create_record("opp-1", "a@b.fr", "", now_ms=1)
        assert record.tracking_id == "trk_opp-1_initial_1"

    def test_unopened(self):
        assert TrackingStore("http://t").open_status("trk_x") == {"tracking_id": "trk_x", "opened": False}

    def test_opens_are_counted(self):
        store = TrackingStore("http://t")
        record = store.register("trk_opp-1_1", "opp-1", "a@b.fr")
        first = store.record_open("trk_opp-1_1")
        store.record_open("trk_opp-1_1")

        status = store.open_status("trk_opp-1_1")
        assert status["opened"] is True
        assert status["count"] == 2
        assert status["opened_at"] == first.opened_at
        assert record.open_count == 2
        assert record.opened_at == first.opened_at

    def test_open_for_unregistered_id(self):
        store = TrackingStore("http://t")
        store.record_open("trk_opp-1_followup_1")
        assert store.open_status("trk_opp-1_followup_1")["opened"] is True
        assert store.records() == []

    def test_pixel_is_a_png(self):
        assert TRANSPARENT_PIXEL.startswith(b"\x89PNG")
