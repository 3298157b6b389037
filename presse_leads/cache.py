import json
import hashlib
import logging
import time
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _key(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()[:16]


def cache_path(cache_dir: str, key_str: str) -> Path:
    return Path(cache_dir) / f"{_key(key_str)}.json"


def cache_get_json(cache_dir: str, key_str: str, max_age_s: Optional[float] = None) -> Optional[dict]:
    """Return the cached dict for key_str, or None if missing, stale or unreadable."""
    p = cache_path(cache_dir, key_str)
    if not p.exists():
        return None
    if max_age_s is not None and time.time() - p.stat().st_mtime > max_age_s:
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable cache entry %s: %s", p, e)
        return None
    return data if isinstance(data, dict) else None


def cache_set_json(cache_dir: str, key_str: str, data: Any) -> str:
    Path(cache_dir).mkdir(parents=True, exist_ok=True)
    p = cache_path(cache_dir, key_str)
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return str(p)
