"""
Article -> sales opportunity detection, the weekly pipeline that assembles
the dashboard rows, and the pending/sent/ignored lifecycle.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .config import Settings, get_settings
from .demo_data import get_demo_opportunities
from .domains import resolve_domain
from .emails import generate_email_suggestion
from .hunter import find_best_contact
from .scraper import ScrapeError, scrape_union_presse
from .types import (
    Article,
    DetectedOpportunity,
    EmailDraft,
    OpportunityStatus,
    ScoredContact,
    WeeklyOpportunity,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpportunityPattern:
    type: str
    keywords: tuple[str, ...]
    score: int
    reasoning: str


# First match wins. Keywords are matched as plain substrings of the
# lower-cased text, so short ones ("jo", "tech") also fire inside words.
OPPORTUNITY_PATTERNS: tuple[OpportunityPattern, ...] = (
    OpportunityPattern(
        "nouvelle_formule",
        ("nouvelle formule", "nouveau format", "refonte", "modernise", "réinvente"),
        8,
        "Nouvelle formule = besoin potentiel d'outils de mise en page et production.",
    ),
    OpportunityPattern(
        "lancement",
        ("lance", "lancement", "nouveau magazine", "nouveau titre", "nouvelle publication"),
        9,
        "Lancement = équipes en croissance, besoin d'efficacité opérationnelle.",
    ),
    OpportunityPattern(
        "recrutement",
        ("recrute", "recrutement", "embauche", "recherche", "poste"),
        7,
        "Recrutement = phase de croissance, opportunité d'automatisation.",
    ),
    OpportunityPattern(
        "transformation_digitale",
        ("digital", "transformation", "numérique", "tech", "innovation"),
        9,
        "Transformation digitale = budget disponible pour nouveaux outils.",
    ),
    OpportunityPattern(
        "evenement",
        ("jeux olympiques", "jo", "coupe du monde", "élection", "événement"),
        6,
        "Événement majeur = pic d'activité, besoin d'efficacité.",
    ),
    OpportunityPattern(
        "prix_augmentation",
        ("augmente", "prix", "hausse", "euro"),
        5,
        "Hausse de prix = recherche de valeur ajoutée pour justifier le tarif.",
    ),
    OpportunityPattern(
        "hors_serie",
        ("hors-série", "hors série", "spécial", "collector", "numéro spécial"),
        6,
        "Hors-série = production supplémentaire, opportunité d'automatisation.",
    ),
)


def detect_opportunity(text: str) -> Optional[DetectedOpportunity]:
    t = (text or "").lower()
    for p in OPPORTUNITY_PATTERNS:
        if any(k in t for k in p.keywords):
            return DetectedOpportunity(type=p.type, score=p.score, reasoning=p.reasoning)
    return None


def classify_article(article: Article) -> Optional[DetectedOpportunity]:
    return detect_opportunity(f"{article.title} {article.summary}")


# ----------------------------
# Weekly pipeline
# ----------------------------
ContactLookup = Callable[[str], Optional[ScoredContact]]


def lookup_contacts(
    publishers: Iterable[str],
    lookup: ContactLookup,
    max_publishers: int = 10,
    max_workers: int = 6,
) -> dict[str, ScoredContact]:
    """
    Best contact per publisher, for the first `max_publishers` distinct
    publishers that have a known domain. A failed lookup means "no contact".
    """
    distinct: list[str] = []
    for p in publishers:
        if p not in distinct:
            distinct.append(p)
    candidates = [p for p in distinct[:max_publishers] if resolve_domain(p)]
    if not candidates:
        return {}

    found: dict[str, ScoredContact] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(candidates))) as ex:
        futs = {ex.submit(lookup, p): p for p in candidates}
        for fut in as_completed(futs):
            publisher = futs[fut]
            try:
                contact = fut.result()
            except Exception as e:
                logger.warning("Contact lookup failed for %s: %s", publisher, e)
                continue
            if contact is not None:
                found[publisher] = contact
    return found


def build_weekly_opportunities(
    articles: list[Article],
    lookup: ContactLookup = find_best_contact,
    max_publishers: int = 10,
) -> list[WeeklyOpportunity]:
    contacts = lookup_contacts([a.publisher for a in articles], lookup, max_publishers=max_publishers)

    out: list[WeeklyOpportunity] = []
    for index, article in enumerate(articles):
        detected = classify_article(article)
        if detected is None:
            continue

        article.category = detected.type
        contact = contacts.get(article.publisher)
        email = generate_email_suggestion(
            article.publisher,
            detected.type,
            first_name=contact.first_name if contact else None,
        )
        out.append(
            WeeklyOpportunity(
                id=f"opp-{index + 1}",
                article=article,
                opportunity=detected,
                detected_at=article.scraped_at,
                contact=contact.to_dict(company=article.publisher) if contact else None,
                email=email,
            )
        )

    out.sort(key=lambda o: o.opportunity.score, reverse=True)
    return out


def load_opportunities(settings: Optional[Settings] = None) -> list[WeeklyOpportunity]:
    """Demo data in demo mode, else a live scrape with demo data as fallback."""
    settings = settings or get_settings()
    if settings.demo_mode:
        logger.info("Using demo data")
        return get_demo_opportunities()

    logger.info("Using live scraping")
    try:
        articles = scrape_union_presse(settings.union_presse_url)
    except ScrapeError as e:
        logger.error("Scraping error: %s. Falling back to demo data", e)
        return get_demo_opportunities()

    return build_weekly_opportunities(
        articles,
        lookup=lambda p: find_best_contact(p, settings=settings),
        max_publishers=settings.max_publishers,
    )


# ----------------------------
# Lifecycle
# ----------------------------
class OpportunityError(Exception):
    pass


class UnknownOpportunity(OpportunityError, KeyError):
    pass


class InvalidTransition(OpportunityError):
    pass


ALLOWED_TRANSITIONS: dict[OpportunityStatus, frozenset[OpportunityStatus]] = {
    OpportunityStatus.PENDING: frozenset({OpportunityStatus.SENT, OpportunityStatus.IGNORED}),
    OpportunityStatus.SENT: frozenset(),
    OpportunityStatus.IGNORED: frozenset(),
}


class OpportunityBoard:
    """
    Holds the current opportunities and their status.

    pending -> sent and pending -> ignored are the only transitions; both
    targets are terminal.
    """

    def __init__(self, items: Iterable[WeeklyOpportunity] = ()):
        self._items: dict[str, WeeklyOpportunity] = {}
        self.load(items)

    def load(self, items: Iterable[WeeklyOpportunity]) -> None:
        """
        Replace the list. An opportunity already handled keeps its status if
        the same id still points at the same article.
        """
        previous = self._items
        self._items = {}
        for item in items:
            old = previous.get(item.id)
            if old is not None and old.article.url == item.article.url:
                item.status = old.status
            self._items[item.id] = item

    def __len__(self) -> int:
        return len(self._items)

    def items(self, status: Optional[OpportunityStatus] = None) -> list[WeeklyOpportunity]:
        return [o for o in self._items.values() if status is None or o.status == status]

    def get(self, opportunity_id: str) -> WeeklyOpportunity:
        try:
            return self._items[opportunity_id]
        except KeyError:
            raise UnknownOpportunity(opportunity_id) from None

    def check_transition(self, opportunity_id: str, target: OpportunityStatus) -> WeeklyOpportunity:
        """Raise unless `target` is reachable from the current status. Changes nothing."""
        item = self.get(opportunity_id)
        if target not in ALLOWED_TRANSITIONS[item.status]:
            raise InvalidTransition(f"{opportunity_id}: {item.status.value} -> {target.value} not allowed")
        return item

    def transition(self, opportunity_id: str, target: OpportunityStatus) -> WeeklyOpportunity:
        item = self.check_transition(opportunity_id, target)
        item.status = target
        logger.info("Opportunity %s marked %s", opportunity_id, target.value)
        return item

    def mark_sent(self, opportunity_id: str) -> WeeklyOpportunity:
        return self.transition(opportunity_id, OpportunityStatus.SENT)

    def mark_ignored(self, opportunity_id: str) -> WeeklyOpportunity:
        return self.transition(opportunity_id, OpportunityStatus.IGNORED)

    def update_email(self, opportunity_id: str, subject: str, body: str) -> WeeklyOpportunity:
        item = self.get(opportunity_id)
        if item.status != OpportunityStatus.PENDING:
            raise InvalidTransition(f"{opportunity_id} is {item.status.value}, email can no longer be edited")
        item.email = EmailDraft(subject=subject, body=body)
        return item
