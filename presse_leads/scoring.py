"""
Contact relevance scoring for B2B outreach to press publishers.

A contact is scored from its job title against one of two ordered rule tables
(large groups vs. small publishers). Titles outside the buying committee are
excluded outright; titles no rule recognises get a low, seniority-based score.
Heuristic and explainable on purpose: every score comes with the reason that
produced it.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .types import RawContact, ScoredContact


EXCLUDED = "⛔"
CONFIRMED = "✅"
UNCERTAIN = "⚠️"


@dataclass(frozen=True)
class Rule:
    keywords: tuple[str, ...]
    score: int
    reason: str

    def matches(self, title: str) -> bool:
        return any(k in title for k in self.keywords)


# ----------------------------
# Exclusions (checked before any rule)
# ----------------------------
EXCLUDED_TITLE_KEYWORDS: tuple[str, ...] = (
    # engineering / IT
    "développeur",
    "developpeur",
    "developer",
    "engineer",
    "ingénieur",
    "ingenieur",
    "devops",
    "data scientist",
    "webmaster",
    # design
    "designer",
    "graphiste",
    "directeur artistique",
    "directrice artistique",
    "maquettiste",
    # QA
    "quality assurance",
    "testeur",
    "tester",
    # HR
    "ressources humaines",
    "human resources",
    "drh",
    "recruteur",
    "recruiter",
    "talent acquisition",
    # legal
    "juridique",
    "juriste",
    "legal",
    "avocat",
    # support
    "support",
    "service client",
    "customer care",
    # interns
    "stagiaire",
    "alternant",
    "apprenti",
    "internship",
    "trainee",
)

EXCLUSION_REASON = f"{EXCLUDED} Poste non pertinent pour une vente B2B"


# ----------------------------
# Rule tables (first match wins, table order is the tie-break)
# ----------------------------
SMALL_COMPANY_RULES: tuple[Rule, ...] = (
    Rule(
        ("ceo", "pdg", "président", "president", "fondateur", "fondatrice", "founder"),
        100,
        f"{CONFIRMED} Dirigeant : décideur direct dans une structure de cette taille",
    ),
    Rule(
        (
            "directeur général",
            "directrice générale",
            "directeur general",
            "general manager",
            "managing director",
            "gérant",
            "gérante",
        ),
        90,
        f"{CONFIRMED} Direction générale : arbitre les investissements outils",
    ),
    Rule(
        ("directeur", "directrice", "director", "head of"),
        80,
        f"{CONFIRMED} Directeur : pouvoir de décision sur son périmètre",
    ),
    Rule(
        ("responsable",),
        70,
        f"{CONFIRMED} Responsable : peut porter le sujet auprès de la direction",
    ),
    Rule(
        ("manager", "chef de", "chef d'"),
        60,
        f"{CONFIRMED} Manager : relais opérationnel, décision à confirmer",
    ),
)

LARGE_COMPANY_RULES: tuple[Rule, ...] = (
    Rule(
        (
            "directeur commercial",
            "directrice commerciale",
            "direction commerciale",
            "commercial director",
            "chief commercial officer",
            "chief revenue officer",
            "head of revenue",
            "directeur de la publicité",
            "directrice de la publicité",
            "directeur publicité",
        ),
        100,
        f"{CONFIRMED} Direction commerciale : porte le chiffre d'affaires et la prospection",
    ),
    Rule(
        (
            "directeur marketing",
            "directrice marketing",
            "directeur du marketing",
            "directrice du marketing",
            "marketing director",
            "chief marketing officer",
            "cmo",
            "head of marketing",
        ),
        95,
        f"{CONFIRMED} Direction marketing : budget acquisition et outils",
    ),
    Rule(
        (
            "directeur digital",
            "directrice digital",
            "directeur du digital",
            "directeur numérique",
            "directrice numérique",
            "directeur de la transformation",
            "directrice de la transformation",
            "chief digital officer",
            "cdo",
            "head of digital",
            "digital director",
        ),
        90,
        f"{CONFIRMED} Direction digitale : pilote les projets de transformation",
    ),
    Rule(
        (
            "directeur des opérations",
            "directrice des opérations",
            "directeur de production",
            "directrice de production",
            "directeur de la fabrication",
            "chief operating officer",
            "operations director",
            "head of operations",
        ),
        85,
        f"{CONFIRMED} Direction des opérations : responsable des process de production",
    ),
    Rule(
        (
            "head of sales",
            "sales director",
            "directeur des ventes",
            "directrice des ventes",
            "business development",
            "développement commercial",
            "responsable commercial",
            "key account",
        ),
        80,
        f"{CONFIRMED} Ventes / développement : sponsor naturel d'un outil de prospection",
    ),
    Rule(
        ("directeur", "directrice", "director", "head of"),
        60,
        f"{CONFIRMED} Directeur : fonction hors cible prioritaire dans un grand groupe",
    ),
)

_RULES_BY_SIZE: dict[bool, tuple[Rule, ...]] = {
    True: LARGE_COMPANY_RULES,
    False: SMALL_COMPANY_RULES,
}


# ----------------------------
# Fallback when no rule matched
# ----------------------------
SENIORITY_SCORES: dict[str, int] = {
    "executive": 50,
    "senior": 30,
    "junior": 20,
}
DEFAULT_SENIORITY_SCORE = 20

SENIOR_UNCLEAR_REASON = f"{UNCERTAIN} Profil senior mais fonction à préciser"
UNCERTAIN_REASON = f"{UNCERTAIN} Pertinence incertaine, à vérifier manuellement"


def _norm_title(position: Optional[str]) -> str:
    return (position or "").strip().lower()


def is_excluded_title(position: Optional[str]) -> bool:
    title = _norm_title(position)
    return any(k in title for k in EXCLUDED_TITLE_KEYWORDS)


def match_rule(position: Optional[str], is_large_company: bool) -> Optional[Rule]:
    title = _norm_title(position)
    for rule in _RULES_BY_SIZE[bool(is_large_company)]:
        if rule.matches(title):
            return rule
    return None


def score_contact(contact: RawContact, is_large_company: bool) -> ScoredContact:
    """
    Score one contact.

    Exclusion beats every rule; then the first matching rule of the table for
    this company size; then the seniority fallback.
    """
    if is_excluded_title(contact.position):
        score, reason = 0, EXCLUSION_REASON
    else:
        rule = match_rule(contact.position, is_large_company)
        if rule is not None:
            score, reason = rule.score, rule.reason
        else:
            seniority = (contact.seniority or "").strip().lower()
            score = SENIORITY_SCORES.get(seniority, DEFAULT_SENIORITY_SCORE)
            reason = SENIOR_UNCLEAR_REASON if seniority == "executive" else UNCERTAIN_REASON

    return ScoredContact(
        contact=contact,
        relevance_score=score,
        relevance_reason=reason,
        is_large_company=bool(is_large_company),
    )


def _ranked(candidates: Iterable[ScoredContact]) -> list[ScoredContact]:
    kept = [c for c in candidates if c.relevance_score > 0]
    # sorted() is stable: equal scores keep their incoming order
    return sorted(kept, key=lambda c: c.relevance_score, reverse=True)


def score_contacts(contacts: Iterable[RawContact], is_large_company: bool) -> list[ScoredContact]:
    """Score all contacts, drop excluded ones, best first."""
    return _ranked(score_contact(c, is_large_company) for c in contacts)


def select_best_contact(candidates: Iterable[ScoredContact]) -> Optional[ScoredContact]:
    ranked = _ranked(candidates)
    return ranked[0] if ranked else None
