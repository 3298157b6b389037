import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_APP_URL = "http://localhost:8080"
DEFAULT_UNION_PRESSE_URL = "https://www.unionpresse.fr"


def _flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _opt(name: str) -> Optional[str]:
    v = (os.environ.get(name) or "").strip()
    return v or None


@dataclass(frozen=True)
class Settings:
    hunter_api_key: Optional[str] = None
    n8n_sequence_webhook: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-5-mini"
    app_url: str = DEFAULT_APP_URL
    union_presse_url: str = DEFAULT_UNION_PRESSE_URL
    demo_mode: bool = False
    use_cache: bool = True
    cache_dir: str = "cache"
    hunter_cache_ttl_s: int = 7 * 24 * 3600
    max_publishers: int = 10
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        app_url = _opt("APP_URL") or _opt("NEXT_PUBLIC_APP_URL") or DEFAULT_APP_URL
        return cls(
            hunter_api_key=_opt("HUNTER_API_KEY"),
            n8n_sequence_webhook=_opt("N8N_SEQUENCE_WEBHOOK"),
            openai_api_key=_opt("OPENAI_API_KEY"),
            openai_model=_opt("OPENAI_MODEL") or "gpt-5-mini",
            app_url=app_url.rstrip("/"),
            union_presse_url=(_opt("UNION_PRESSE_URL") or DEFAULT_UNION_PRESSE_URL).rstrip("/"),
            demo_mode=_flag("DEMO_MODE"),
            use_cache=_flag("USE_CACHE", default=True),
            cache_dir=_opt("CACHE_DIR") or "cache",
            hunter_cache_ttl_s=int(_opt("HUNTER_CACHE_TTL_S") or 7 * 24 * 3600),
            max_publishers=int(_opt("MAX_PUBLISHERS") or 10),
            log_level=(_opt("LOG_LEVEL") or "INFO").upper(),
        )

    def cache_subdir(self, name: str) -> str:
        return os.path.join(self.cache_dir, name)


def get_settings() -> Settings:
    return Settings.from_env()
