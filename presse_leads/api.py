"""
HTTP API: opportunity list, operator actions and the tracking pixel.

Run with `python -m presse_leads.api`.
"""

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request

from .config import Settings, get_settings
from .emails import SequenceError, SequenceRequest, send_sequence
from .log import setup_logging
from .opportunities import (
    InvalidTransition,
    OpportunityBoard,
    UnknownOpportunity,
    load_opportunities,
)
from .scraper import ScrapeError, scrape_union_presse
from .tracking import PIXEL_HEADERS, TRANSPARENT_PIXEL, TrackingStore
from .types import OpportunityStatus, utc_now_iso

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    board: Optional[OpportunityBoard] = None,
    tracking: Optional[TrackingStore] = None,
) -> Flask:
    settings = settings or get_settings()
    board = board if board is not None else OpportunityBoard()
    tracking = tracking if tracking is not None else TrackingStore(settings.app_url)

    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.extensions["presse_leads"] = {"settings": settings, "board": board, "tracking": tracking}

    @app.route("/api/opportunities")
    def api_opportunities():
        """Refresh the list (demo or live scrape) and return it."""
        board.load(load_opportunities(settings))
        return jsonify([o.to_dict() for o in board.items()])

    @app.route("/api/scrape")
    def api_scrape():
        try:
            articles = scrape_union_presse(settings.union_presse_url)
        except ScrapeError as e:
            logger.error("Scrape error: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify(
            {
                "success": True,
                "count": len(articles),
                "articles": [a.to_dict() for a in articles],
                "scraped_at": utc_now_iso(),
            }
        )

    @app.route("/api/send-sequence", methods=["POST"])
    def api_send_sequence():
        req = SequenceRequest.from_dict(request.get_json(silent=True) or {})
        missing = req.missing_fields()
        if missing:
            return jsonify({"success": False, "error": f"Missing required fields: {', '.join(missing)}"}), 400

        # sent and ignored are terminal: refuse before anything leaves the process
        try:
            board.check_transition(req.opportunity_id, OpportunityStatus.SENT)
        except UnknownOpportunity:
            logger.info("Sending %s, which is not on the current board", req.opportunity_id)
        except InvalidTransition as e:
            return jsonify({"success": False, "error": str(e)}), 409

        try:
            result = send_sequence(req, settings=settings)
        except SequenceError as e:
            logger.error("Send sequence error: %s", e)
            return jsonify({"success": False, "error": str(e)}), 500

        tracking.register(result["tracking_id"], req.opportunity_id, req.contact_email, "initial")
        try:
            board.mark_sent(req.opportunity_id)
        except UnknownOpportunity:
            logger.info("Sequence sent for %s, which is not on the current board", req.opportunity_id)
        except InvalidTransition as e:
            logger.warning("Sequence sent but status unchanged: %s", e)
        return jsonify(result)

    @app.route("/api/ignore", methods=["POST"])
    def api_ignore():
        data = request.get_json(silent=True) or {}
        opportunity_id = data.get("opportunityId") or data.get("opportunity_id")
        if not opportunity_id:
            return jsonify({"error": "Missing opportunity ID"}), 400
        try:
            board.mark_ignored(opportunity_id)
        except UnknownOpportunity:
            return jsonify({"error": f"Unknown opportunity: {opportunity_id}"}), 404
        except InvalidTransition as e:
            return jsonify({"error": str(e)}), 409
        return jsonify({"success": True, "message": "Opportunity ignored", "status": OpportunityStatus.IGNORED.value})

    @app.route("/api/track", methods=["GET"])
    def api_track_list():
        return jsonify([vars(r) for r in tracking.records()])

    @app.route("/api/track", methods=["POST"])
    def api_track_create():
        data = request.get_json(silent=True) or {}
        if not data.get("opportunity_id") or not data.get("contact_email"):
            return jsonify({"error": "Missing opportunity_id or contact_email"}), 400
        email_type = data.get("email_type") or "initial"
        if data.get("tracking_id"):
            # id already minted by the sequence builder (dashboard sends)
            record = tracking.register(data["tracking_id"], data["opportunity_id"], data["contact_email"], email_type)
        else:
            record = tracking.create_record(data["opportunity_id"], data["contact_email"], email_type)
        return jsonify(
            {
                **vars(record),
                "pixel_url": tracking.pixel_url(record.tracking_id),
                "pixel_html": tracking.pixel_html(record.tracking_id),
            }
        )

    @app.route("/api/track/<tracking_id>", methods=["GET"])
    def api_track_pixel(tracking_id: str):
        tracking.record_open(tracking_id)
        return Response(TRANSPARENT_PIXEL, headers=PIXEL_HEADERS)

    @app.route("/api/track/<tracking_id>", methods=["POST"])
    def api_track_status(tracking_id: str):
        return jsonify(tracking.open_status(tracking_id))

    return app


if __name__ == "__main__":
    _settings = get_settings()
    setup_logging(_settings.log_level)
    create_app(_settings).run(host="127.0.0.1", port=8080, use_reloader=False)
