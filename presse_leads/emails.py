"""
Outreach email drafts and the two-step send sequence.

Every template follows the same structure: introduction ("Je vous contacte
car"), proposition ("J'imagine que") and call to action ("Est-ce que vous
auriez").
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .config import Settings, get_settings
from .types import EmailDraft

logger = logging.getLogger(__name__)

SIGNATURE = "Alexandre"
FOLLOWUP_DELAY_DAYS = 4
CALL_TO_ACTION = "Est-ce que vous auriez quelques minutes dans la semaine pour échanger ?"

# (subject suffix, body with {greeting} and {publisher} placeholders)
TEMPLATES: dict[str, tuple[str, str]] = {
    "nouvelle_formule": (
        "nouvelle formule",
        """{greeting}

Je vous contacte car j'ai vu l'annonce de la nouvelle formule de {publisher}. Une refonte éditoriale est souvent synonyme de nouveaux process à mettre en place.

J'imagine que vous cherchez à optimiser les workflows de production pour cette nouvelle version — c'est exactement ce sur quoi nous accompagnons les éditeurs de presse : automatisation des mises en page, génération de contenus, workflow éditorial.""",
    ),
    "lancement": (
        "nouveau lancement",
        """{greeting}

Je vous contacte car j'ai appris le lancement de votre nouveau titre chez {publisher}. Félicitations !

J'imagine que la montée en charge de la production va être un enjeu clé dans les prochaines semaines. Nous accompagnons des éditeurs comme vous pour automatiser les tâches répétitives et gagner du temps sur ce qui compte : le contenu.""",
    ),
    "recrutement": (
        "vos recrutements",
        """{greeting}

Je vous contacte car j'ai vu que {publisher} est en phase de recrutement. Intégrer de nouvelles équipes, c'est toujours un moment clé.

J'imagine que vous cherchez à maximiser rapidement leur efficacité. Nous accompagnons des éditeurs pour automatiser les tâches répétitives — nos clients gagnent en moyenne 2h par jour et par collaborateur.""",
    ),
    "transformation_digitale": (
        "transformation digitale",
        """{greeting}

Je vous contacte car votre projet de transformation digitale chez {publisher} a retenu mon attention.

J'imagine que vous êtes en train de repenser vos outils et process. C'est exactement le bon moment pour intégrer de l'automatisation intelligente. Nous avons accompagné des groupes média similaires avec des résultats mesurables.""",
    ),
    "evenement": (
        "couverture événementielle",
        """{greeting}

Je vous contacte car j'ai vu que {publisher} prépare une couverture événementielle importante.

J'imagine que ces pics d'activité demandent une organisation sans faille. Nous aidons les rédactions à automatiser les tâches répétitives pour se concentrer sur le terrain et la qualité éditoriale.""",
    ),
    "prix_augmentation": (
        "évolution tarifaire",
        """{greeting}

Je vous contacte car j'ai remarqué l'évolution tarifaire de {publisher}.

J'imagine que vous cherchez à renforcer la valeur perçue par vos lecteurs. L'automatisation des process permet de réinvestir du temps dans ce qui fait la différence : la qualité du contenu et l'expérience lecteur.""",
    ),
    "hors_serie": (
        "hors-série",
        """{greeting}

Je vous contacte car j'ai vu la sortie de votre nouveau hors-série chez {publisher}.

J'imagine que la production de ces numéros spéciaux mobilise beaucoup de ressources. Nous accompagnons des éditeurs pour automatiser les tâches répétitives et libérer du temps pour la création.""",
    ),
    "default": (
        "actualités",
        """{greeting}

Je vous contacte car j'ai lu avec intérêt les dernières actualités de {publisher}.

J'imagine que l'optimisation des process est un sujet pour vous. Nous accompagnons les éditeurs de presse dans leur transformation : automatisation, IA générative, optimisation des workflows.""",
    ),
}

FOLLOWUP_TEMPLATE = """Bonjour {first_name},

Je me permets de vous relancer suite à mon précédent message concernant {company}.

Avez-vous eu l'occasion d'y jeter un œil ?

Je reste disponible si vous souhaitez en discuter.

{signature}"""


class SequenceError(RuntimeError):
    pass


def greeting_for(first_name: Optional[str]) -> str:
    return f"Bonjour {first_name}," if first_name else "Bonjour,"


def generate_email_suggestion(
    publisher: str,
    opportunity_type: str,
    first_name: Optional[str] = None,
) -> EmailDraft:
    suffix, body = TEMPLATES.get(opportunity_type, TEMPLATES["default"])
    text = body.format(greeting=greeting_for(first_name), publisher=publisher)
    return EmailDraft(
        subject=f"{publisher} - {suffix}",
        body=f"{text}\n\n{CALL_TO_ACTION}\n\n{SIGNATURE}",
    )


def pixel_img(pixel_url: str) -> str:
    return f'<img src="{pixel_url}" width="1" height="1" style="display:none" alt="" />'


@dataclass
class SequenceRequest:
    opportunity_id: str = ""
    contact_email: str = ""
    email_subject: str = ""
    email_body: str = ""
    contact_first_name: Optional[str] = None
    contact_last_name: Optional[str] = None
    company: str = ""
    article_title: str = ""
    article_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SequenceRequest":
        fields = cls.__dataclass_fields__
        return cls(**{k: v for k, v in (data or {}).items() if k in fields})

    def missing_fields(self) -> list[str]:
        required = ["opportunity_id", "contact_email", "email_subject", "email_body"]
        return [f for f in required if not getattr(self, f)]


def build_sequence(req: SequenceRequest, app_url: str, now_ms: Optional[int] = None) -> dict[str, Any]:
    """
    Initial email + follow-up, each with its own tracking pixel.
    Returns the webhook payload.
    """
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    base = app_url.rstrip("/")
    tracking_id = f"trk_{req.opportunity_id}_{now_ms}"
    pixel_url = f"{base}/api/track/{tracking_id}"
    followup_pixel = f"{base}/api/track/trk_{req.opportunity_id}_followup_{now_ms}"

    followup_body = FOLLOWUP_TEMPLATE.format(
        first_name=req.contact_first_name or "",
        company=req.company,
        signature=SIGNATURE,
    )

    return {
        "opportunity_id": req.opportunity_id,
        "tracking_id": tracking_id,
        "contact": {
            "email": req.contact_email,
            "first_name": req.contact_first_name,
            "last_name": req.contact_last_name,
            "company": req.company,
        },
        "initial_email": {
            "subject": req.email_subject,
            "body": f"{req.email_body}\n\n{pixel_img(pixel_url)}",
        },
        "followup_email": {
            "subject": f"Re: {req.email_subject}",
            "body": f"{followup_body}\n\n{pixel_img(followup_pixel)}",
            "delay_days": FOLLOWUP_DELAY_DAYS,
        },
        "article": {
            "title": req.article_title,
            "url": req.article_url,
        },
        "pixel_url": pixel_url,
    }


def send_sequence(
    req: SequenceRequest,
    settings: Optional[Settings] = None,
    now_ms: Optional[int] = None,
    timeout_s: int = 15,
) -> dict[str, Any]:
    """
    Hand the sequence to the n8n workflow. Without a configured webhook the
    prepared emails are returned so the operator can send them by hand.
    """
    settings = settings or get_settings()
    payload = build_sequence(req, settings.app_url, now_ms=now_ms)
    tracking_id = payload["tracking_id"]

    if settings.n8n_sequence_webhook:
        try:
            r = requests.post(settings.n8n_sequence_webhook, json=payload, timeout=timeout_s)
        except requests.RequestException as e:
            raise SequenceError(f"n8n webhook failed: {e}") from e
        if r.status_code >= 400:
            raise SequenceError(f"n8n webhook failed: {r.status_code}")
        logger.info("Sequence triggered for %s (%s)", req.opportunity_id, tracking_id)
        return {
            "success": True,
            "message": "Sequence triggered",
            "tracking_id": tracking_id,
            "n8n_triggered": True,
        }

    logger.info("N8N_SEQUENCE_WEBHOOK not set, returning prepared sequence for %s", req.opportunity_id)
    followup = payload["followup_email"]
    return {
        "success": True,
        "message": "Sequence prepared (n8n not configured)",
        "tracking_id": tracking_id,
        "pixel_url": payload["pixel_url"],
        "n8n_triggered": False,
        "prepared_data": {
            "initial_email": {"to": req.contact_email, **payload["initial_email"]},
            "followup_email": {
                "to": req.contact_email,
                "subject": followup["subject"],
                "body": followup["body"],
                "send_after_days": followup["delay_days"],
            },
        },
    }
