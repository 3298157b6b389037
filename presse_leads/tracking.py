"""
Email open tracking.

Records and opens live in process memory only and are lost on restart.
Opens are accepted for any tracking id, including ids this process never
registered (e.g. follow-up pixels generated by the sequence builder).
"""

import base64
import logging
import time
from dataclasses import dataclass, asdict
from typing import Any, Optional

from .emails import pixel_img
from .types import utc_now_iso

logger = logging.getLogger(__name__)

# 1x1 transparent PNG
TRANSPARENT_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)

PIXEL_HEADERS = {
    "Content-Type": "image/png",
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@dataclass
class TrackingRecord:
    tracking_id: str
    opportunity_id: str
    contact_email: str
    email_type: str = "initial"  # initial | followup
    sent_at: str = ""
    opened_at: Optional[str] = None
    open_count: int = 0


@dataclass
class OpenEvent:
    opened_at: str
    count: int = 1


class TrackingStore:
    def __init__(self, app_url: str):
        self.app_url = app_url.rstrip("/")
        self._records: dict[str, TrackingRecord] = {}
        self._opens: dict[str, OpenEvent] = {}

    def pixel_url(self, tracking_id: str) -> str:
        return f"{self.app_url}/api/track/{tracking_id}"

    def pixel_html(self, tracking_id: str) -> str:
        return pixel_img(self.pixel_url(tracking_id))

    def register(
        self,
        tracking_id: str,
        opportunity_id: str,
        contact_email: str,
        email_type: str = "initial",
    ) -> TrackingRecord:
        record = TrackingRecord(
            tracking_id=tracking_id,
            opportunity_id=opportunity_id,
            contact_email=contact_email,
            email_type=email_type or "initial",
            sent_at=utc_now_iso(),
        )
        self._records[tracking_id] = record
        return record

    def create_record(
        self,
        opportunity_id: str,
        contact_email: str,
        email_type: str = "initial",
        now_ms: Optional[int] = None,
    ) -> TrackingRecord:
        email_type = email_type or "initial"
        now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
        tracking_id = f"trk_{opportunity_id}_{email_type}_{now_ms}"
        return self.register(tracking_id, opportunity_id, contact_email, email_type)

    def records(self) -> list[TrackingRecord]:
        return list(self._records.values())

    def record_open(self, tracking_id: str) -> OpenEvent:
        now = utc_now_iso()
        event = self._opens.get(tracking_id)
        if event:
            event.count += 1
        else:
            event = OpenEvent(opened_at=now)
            self._opens[tracking_id] = event

        record = self._records.get(tracking_id)
        if record:
            record.open_count = event.count
            record.opened_at = record.opened_at or event.opened_at

        logger.info("Email opened: %s at %s", tracking_id, now)
        return event

    def open_status(self, tracking_id: str) -> dict[str, Any]:
        event = self._opens.get(tracking_id)
        out: dict[str, Any] = {"tracking_id": tracking_id, "opened": event is not None}
        if event:
            out.update(asdict(event))
        return out
