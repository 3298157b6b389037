import json
import hashlib
import logging
from typing import Any, Dict, Optional

from openai import OpenAI

from .cache import cache_get_json, cache_set_json
from .config import Settings, get_settings
from .types import EmailDraft

logger = logging.getLogger(__name__)

REWRITE_VERSION = "v1"  # bump when the prompt changes

REWRITE_PROMPT_TEMPLATE = """
Tu es un commercial B2B qui écrit à des éditeurs de presse français.
Réécris l'email ci-dessous pour qu'il soit plus direct et plus personnel, sans changer l'offre.

STRUCTURE À CONSERVER :
1) Introduction qui commence par "Je vous contacte car"
2) Proposition qui commence par "J'imagine que"
3) Appel à l'action qui commence par "Est-ce que vous auriez"
Garde la formule de salutation et la signature telles quelles.

CONSIGNES DE L'OPÉRATEUR (peuvent être vides) :
{instructions}

EMAIL ACTUEL
Objet : {subject}
Corps :
{body}

RENVOIE du JSON avec EXACTEMENT ces champs :
- subject: string
- body: string

RÈGLES :
- N'invente aucun fait sur l'éditeur.
- Pas de jargon marketing.
- Maximum 120 mots pour le corps.
""".strip()

_client: Optional[OpenAI] = None


def _get_client(settings: Settings) -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=settings.openai_api_key)
    return _client


def _safe_parse_json(text: str) -> Dict[str, Any]:
    t = (text or "").strip()
    try:
        obj = json.loads(t)
        return obj if isinstance(obj, dict) else {}
    except ValueError:
        pass

    start = t.find("{")
    end = t.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            obj = json.loads(t[start : end + 1])
            return obj if isinstance(obj, dict) else {}
        except ValueError:
            return {}
    return {}


def is_available(settings: Optional[Settings] = None) -> bool:
    settings = settings or get_settings()
    return bool(settings.openai_api_key)


def rewrite_email(
    draft: EmailDraft,
    instructions: str = "",
    settings: Optional[Settings] = None,
    use_cache: bool = True,
) -> EmailDraft:
    """
    Ask the model for a tighter version of a draft.
    If the answer is not usable JSON, keep the subject and take the raw text as body.
    """
    settings = settings or get_settings()
    digest = hashlib.sha256(
        f"{draft.subject}\n{draft.body}\n{instructions}".encode("utf-8")
    ).hexdigest()[:16]
    cache_key = f"rewrite::{REWRITE_VERSION}::{settings.openai_model}::{digest}"
    cache_dir = settings.cache_subdir("rewrites")

    if use_cache:
        cached = cache_get_json(cache_dir, cache_key)
        if cached:
            return EmailDraft(subject=cached["subject"], body=cached["body"])

    prompt = REWRITE_PROMPT_TEMPLATE.format(
        instructions=instructions.strip() or "(aucune)",
        subject=draft.subject,
        body=draft.body,
    )
    resp = _get_client(settings).responses.create(model=settings.openai_model, input=prompt)
    text = (resp.output_text or "").strip()
    parsed = _safe_parse_json(text)

    subject = parsed.get("subject") if isinstance(parsed.get("subject"), str) else ""
    body = parsed.get("body") if isinstance(parsed.get("body"), str) else ""
    if not body:
        logger.warning("Rewrite returned no usable JSON, keeping raw text")
        subject, body = draft.subject, text or draft.body

    result = EmailDraft(subject=subject.strip() or draft.subject, body=body.strip())
    cache_set_json(cache_dir, cache_key, result.to_dict())
    return result
