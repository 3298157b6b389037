import re
import os
import hashlib
import logging
from typing import Optional
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


def clean_text(s: str) -> str:
    s = re.sub(r"\s+", " ", s or "")
    return s.strip()


def absolute_url(base_url: str, href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    href = href.strip()
    if href.startswith("http"):
        return href
    return urljoin(base_url.rstrip("/") + "/", href)


def _http_cache_path(cache_dir: str, url: str) -> str:
    os.makedirs(cache_dir, exist_ok=True)
    key = hashlib.sha256(url.encode("utf-8")).hexdigest()[:24]
    return os.path.join(cache_dir, f"{key}.html")


def fetch_url(
    url: str,
    timeout_s: int = 12,
    use_cache: bool = False,
    cache_dir: str = os.path.join(".cache", "http"),
) -> Optional[str]:
    """
    Fetch HTML from a URL. Returns HTML string or None on error.
    The disk cache is meant for article pages, which do not change; the
    aggregator homepage must be fetched fresh.
    """
    if not url:
        return None

    if use_cache:
        p = _http_cache_path(cache_dir, url)
        if os.path.exists(p):
            with open(p, "r", encoding="utf-8", errors="ignore") as f:
                return f.read()

    headers = {
        "User-Agent": USER_AGENT,
        "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
    }
    try:
        r = requests.get(url, headers=headers, timeout=timeout_s, allow_redirects=True)
    except requests.RequestException as e:
        logger.warning("Failed to fetch %s: %s", url, e)
        return None

    if r.status_code >= 400:
        logger.warning("Failed to fetch %s: HTTP %s", url, r.status_code)
        return None
    html = r.text

    if use_cache:
        try:
            with open(_http_cache_path(cache_dir, url), "w", encoding="utf-8") as f:
                f.write(html)
        except OSError as e:
            logger.warning("Could not cache %s: %s", url, e)

    return html
