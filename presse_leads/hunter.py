"""
Hunter.io domain-search client.

Every failure (no key, HTTP error, network error, malformed payload) is
logged and turned into an empty result: a missing contact must never break
the opportunity list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from .cache import cache_get_json, cache_set_json
from .config import Settings, get_settings
from .domains import is_large_company, resolve_domain
from .scoring import score_contacts, select_best_contact
from .types import RawContact, ScoredContact

logger = logging.getLogger(__name__)

HUNTER_DOMAIN_SEARCH_URL = "https://api.hunter.io/v2/domain-search"
MIN_CONFIDENCE = 50

SENIORITY_ORDER = {
    "executive": 3,
    "senior": 2,
    "junior": 1,
}


@dataclass
class HunterResult:
    organization: Optional[str] = None
    pattern: Optional[str] = None
    contacts: list[RawContact] = field(default_factory=list)


def _confidence(value: Any) -> int:
    """Hunter sends an int; tolerate "85" or 85.0, anything else counts as 0."""
    try:
        return int(float(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def contact_from_api(record: dict[str, Any]) -> RawContact:
    """Map one entry of `data.emails` to a RawContact."""
    return RawContact(
        email=record.get("value") or "",
        first_name=record.get("first_name") or None,
        last_name=record.get("last_name") or None,
        position=record.get("position") or None,
        linkedin=record.get("linkedin") or None,
        confidence=_confidence(record.get("confidence")),
        department=record.get("department") or None,
        seniority=record.get("seniority") or None,
    )


def _parse_domain_search(data: dict[str, Any]) -> HunterResult:
    contacts = [
        contact_from_api(e)
        for e in (data.get("emails") or [])
        if isinstance(e, dict) and _confidence(e.get("confidence")) >= MIN_CONFIDENCE
    ]
    # executive > senior > junior > unknown, then most confident first
    contacts.sort(key=lambda c: (-SENIORITY_ORDER.get(c.seniority or "", 0), -c.confidence))
    return HunterResult(
        organization=data.get("organization") or None,
        pattern=data.get("pattern") or None,
        contacts=contacts,
    )


def _request_domain_search(domain: str, api_key: str, limit: int, timeout_s: int) -> Optional[dict[str, Any]]:
    params = {"domain": domain, "api_key": api_key, "limit": limit}
    try:
        r = requests.get(HUNTER_DOMAIN_SEARCH_URL, params=params, timeout=timeout_s)
    except requests.RequestException as e:
        logger.error("Hunter API request failed for %s: %s", domain, e)
        return None
    if r.status_code >= 400:
        logger.error("Hunter API error for %s: HTTP %s", domain, r.status_code)
        return None
    try:
        payload = r.json()
    except ValueError:
        logger.error("Hunter API returned non-JSON body for %s", domain)
        return None
    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, dict) else None


def find_contacts(
    domain: str,
    limit: int = 5,
    settings: Optional[Settings] = None,
    timeout_s: int = 12,
) -> HunterResult:
    settings = settings or get_settings()
    if not settings.hunter_api_key:
        logger.warning("HUNTER_API_KEY not set")
        return HunterResult()

    cache_key = f"hunter::{domain}::{limit}"
    cache_dir = settings.cache_subdir("hunter")
    data = None
    if settings.use_cache:
        data = cache_get_json(cache_dir, cache_key, max_age_s=settings.hunter_cache_ttl_s)

    if data is None:
        data = _request_domain_search(domain, settings.hunter_api_key, limit, timeout_s)
        if data is None:
            return HunterResult()
        if settings.use_cache:
            cache_set_json(cache_dir, cache_key, data)

    return _parse_domain_search(data)


def find_best_contact(publisher: str, settings: Optional[Settings] = None) -> Optional[ScoredContact]:
    """
    Publisher name -> best scored contact, or None.

    None covers both "publisher unknown" and "no contact worth writing to".
    """
    domain = resolve_domain(publisher)
    if not domain:
        logger.info("No domain found for publisher: %s", publisher)
        return None

    result = find_contacts(domain, settings=settings)
    if not result.contacts:
        return None

    scored = score_contacts(result.contacts, is_large_company(domain))
    best = select_best_contact(scored)
    if best is None:
        logger.info("No relevant contact at %s (%d candidates excluded)", domain, len(result.contacts))
    return best
