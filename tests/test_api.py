"""
Tests for the Flask API, using the app's test client.
"""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from presse_leads.api import create_app
from presse_leads.emails import SequenceError
from presse_leads.opportunities import OpportunityBoard
from presse_leads.scraper import ScrapeError
from presse_leads.tracking import TrackingStore
from presse_leads.types import Article, OpportunityStatus


@pytest.fixture
def board():
    return OpportunityBoard()


@pytest.fixture
def tracking(settings):
    return TrackingStore(settings.app_url)


@pytest.fixture
def client(settings, board, tracking):
    app = create_app(settings, board=board, tracking=tracking)
    app.testing = True
    return app.test_client()


@pytest.fixture
def hooked_client(settings, board, tracking):
    hooked = replace(settings, n8n_sequence_webhook="https://n8n.test/webhook/sequence")
    app = create_app(hooked, board=board, tracking=tracking)
    app.testing = True
    return app.test_client()


def _sequence_body(**overrides):
    body = {
        "opportunity_id": "opp-001",
        "contact_email": "jean.dupont@lefigaro.fr",
        "contact_first_name": "Jean",
        "company": "Le Figaro",
        "email_subject": "Le Figaro - vos recrutements",
        "email_body": "Bonjour Jean,",
    }
    body.update(overrides)
    return body


class TestOpportunitiesRoute:
    def test_demo_list(self, client, board):
        resp = client.get("/api/opportunities")
        assert resp.status_code == 200

        data = resp.get_json()
        assert [o["opportunity"]["id"] for o in data] == ["opp-001", "opp-002", "opp-003"]
        first = data[0]
        assert first["status"] == "pending"
        assert first["contact"]["relevance_score"] == 100
        assert first["email"]["subject"]
        assert len(board) == 3

    def test_accents_are_not_escaped(self, client):
        resp = client.get("/api/opportunities")
        assert "Directrice de la Rédaction".encode("utf-8") in resp.data


class TestScrapeRoute:
    def test_success(self, client):
        articles = [Article(url="https://u/a", title="GQ lance un titre", publisher="GQ")]
        with patch("presse_leads.api.scrape_union_presse", return_value=articles):
            resp = client.get("/api/scrape")
        data = resp.get_json()
        assert resp.status_code == 200
        assert data["success"] is True
        assert data["count"] == 1
        assert data["articles"][0]["publisher"] == "GQ"

    def test_failure(self, client):
        with patch("presse_leads.api.scrape_union_presse", side_effect=ScrapeError("Failed to fetch")):
            resp = client.get("/api/scrape")
        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "error": "Failed to fetch"}


class TestSendSequenceRoute:
    def test_missing_fields(self, client):
        resp = client.post("/api/send-sequence", json={"opportunity_id": "opp-001"})
        assert resp.status_code == 400
        assert "contact_email" in resp.get_json()["error"]

    def test_prepared_without_webhook(self, client, board, tracking):
        client.get("/api/opportunities")
        resp = client.post("/api/send-sequence", json=_sequence_body())

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["n8n_triggered"] is False
        assert data["tracking_id"].startswith("trk_opp-001_")
        assert board.get("opp-001").status == OpportunityStatus.SENT
        assert [r.tracking_id for r in tracking.records()] == [data["tracking_id"]]

    def test_resend_is_rejected_before_webhook(self, hooked_client, board):
        hooked_client.get("/api/opportunities")
        with patch("presse_leads.emails.requests.post", return_value=MagicMock(status_code=200)) as mock_post:
            first = hooked_client.post("/api/send-sequence", json=_sequence_body())
            second = hooked_client.post("/api/send-sequence", json=_sequence_body())

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.get_json()["success"] is False
        assert "sent -> sent not allowed" in second.get_json()["error"]
        assert mock_post.call_count == 1
        assert board.get("opp-001").status == OpportunityStatus.SENT

    def test_send_after_ignore_is_rejected(self, hooked_client, board, tracking):
        hooked_client.get("/api/opportunities")
        hooked_client.post("/api/ignore", json={"opportunityId": "opp-001"})
        with patch("presse_leads.emails.requests.post") as mock_post:
            resp = hooked_client.post("/api/send-sequence", json=_sequence_body())

        assert resp.status_code == 409
        assert "ignored -> sent not allowed" in resp.get_json()["error"]
        mock_post.assert_not_called()
        assert board.get("opp-001").status == OpportunityStatus.IGNORED
        assert tracking.records() == []

    def test_id_not_on_board_is_still_sent(self, client, tracking):
        resp = client.post("/api/send-sequence", json=_sequence_body(opportunity_id="opp-42"))
        assert resp.status_code == 200
        assert [r.opportunity_id for r in tracking.records()] == ["opp-42"]

    def test_webhook_failure(self, client):
        with patch("presse_leads.api.send_sequence", side_effect=SequenceError("n8n webhook failed: 500")):
            resp = client.post("/api/send-sequence", json=_sequence_body())
        assert resp.status_code == 500
        assert resp.get_json()["success"] is False


class TestIgnoreRoute:
    def test_ignore(self, client, board):
        client.get("/api/opportunities")
        resp = client.post("/api/ignore", json={"opportunityId": "opp-002"})
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "ignored"
        assert board.get("opp-002").status == OpportunityStatus.IGNORED

    def test_snake_case_id(self, client):
        client.get("/api/opportunities")
        assert client.post("/api/ignore", json={"opportunity_id": "opp-002"}).status_code == 200

    def test_missing_id(self, client):
        assert client.post("/api/ignore", json={}).status_code == 400

    def test_unknown_id(self, client):
        client.get("/api/opportunities")
        assert client.post("/api/ignore", json={"opportunityId": "opp-999"}).status_code == 404

    def test_already_handled(self, client):
        client.get("/api/opportunities")
        client.post("/api/ignore", json={"opportunityId": "opp-002"})
        assert client.post("/api/ignore", json={"opportunityId": "opp-002"}).status_code == 409


class TestTrackingRoutes:
    def test_pixel_records_open(self, client):
        resp = client.get("/api/track/trk_opp-001_1")
        assert resp.status_code == 200
        assert resp.headers["Content-Type"] == "image/png"
        assert "no-store" in resp.headers["Cache-Control"]
        assert resp.data.startswith(b"\x89PNG")

        status = client.post("/api/track/trk_opp-001_1").get_json()
        assert status["opened"] is True
        assert status["count"] == 1

    def test_status_before_open(self, client):
        assert client.post("/api/track/trk_nothing").get_json() == {"tracking_id": "trk_nothing", "opened": False}

    def test_create_record(self, client, settings):
        resp = client.post("/api/track", json={"opportunity_id": "opp-001", "contact_email": "a@b.fr"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["tracking_id"].startswith("trk_opp-001_initial_")
        assert data["pixel_url"] == f"{settings.app_url}/api/track/{data['tracking_id']}"
        assert data["pixel_html"].startswith("<img")

        listed = client.get("/api/track").get_json()
        assert [r["tracking_id"] for r in listed] == [data["tracking_id"]]

    def test_register_existing_tracking_id(self, client):
        body = {"tracking_id": "trk_opp-001_1769677200000", "opportunity_id": "opp-001", "contact_email": "a@b.fr"}
        resp = client.post("/api/track", json=body)
        assert resp.status_code == 200
        assert resp.get_json()["tracking_id"] == "trk_opp-001_1769677200000"

        client.get("/api/track/trk_opp-001_1769677200000")
        listed = client.get("/api/track").get_json()
        assert [(r["tracking_id"], r["open_count"]) for r in listed] == [("trk_opp-001_1769677200000", 1)]

    def test_create_record_missing_fields(self, client):
        assert client.post("/api/track", json={"opportunity_id": "opp-001"}).status_code == 400
