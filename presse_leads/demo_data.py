"""
Demo data for the dashboard when live scraping is disabled or fails.
"""

from typing import Any

from .domains import is_large_company, resolve_domain
from .scoring import score_contact
from .types import Article, DetectedOpportunity, EmailDraft, RawContact, WeeklyOpportunity


DEMO_ARTICLES = [
    Article(
        url="https://union-presse.fr/articles/figaro-recrute",
        title="Le Figaro recrute 10 commerciaux pour accélérer sa croissance digitale",
        summary=(
            "Le groupe de presse cherche à renforcer ses équipes commerciales face à la concurrence accrue "
            "sur le marché publicitaire digital. Cette expansion s'inscrit dans un plan de transformation "
            "digitale ambitieux."
        ),
        publisher="Le Figaro",
        category="Recrutement",
        published_date="2026-01-28",
        scraped_at="2026-01-29T09:00:00Z",
    ),
    Article(
        url="https://union-presse.fr/articles/ouest-france-magazine",
        title="Ouest-France lance un nouveau magazine mensuel lifestyle",
        summary=(
            "Le quotidien régional diversifie son offre avec un nouveau titre print nécessitant une équipe "
            "éditoriale dédiée. Le magazine sera disponible en kiosque dès mars."
        ),
        publisher="Ouest-France",
        category="Lancement",
        published_date="2026-01-27",
        scraped_at="2026-01-28T09:00:00Z",
    ),
    Article(
        url="https://union-presse.fr/articles/marie-claire-transformation",
        title="Groupe Marie Claire annonce sa transformation digitale complète",
        summary=(
            "Le groupe investit 50M€ dans la modernisation de ses outils. Recrutement prévu de 20 profils "
            "tech et commercial. Automatisation des processus éditoriaux au programme."
        ),
        publisher="Groupe Marie Claire",
        category="Stratégie",
        published_date="2026-01-26",
        scraped_at="2026-01-27T09:00:00Z",
    ),
]

# (opportunity id, article url, type, score, reasoning, detected_at)
DEMO_OPPORTUNITIES = [
    (
        "opp-001",
        "https://union-presse.fr/articles/figaro-recrute",
        "prospection_automation",
        8,
        "Recrutement massif de commerciaux = besoin d'efficacité prospection. Phase de croissance avec "
        "pression concurrentielle, timing idéal pour automatisation.",
        "2026-01-29T09:05:00Z",
    ),
    (
        "opp-002",
        "https://union-presse.fr/articles/ouest-france-magazine",
        "layout_automation",
        7,
        "Nouveau magazine = nouvelle mise en page régulière. Volume de production augmenté, opportunité "
        "d'automatiser les layouts.",
        "2026-01-28T09:05:00Z",
    ),
    (
        "opp-003",
        "https://union-presse.fr/articles/marie-claire-transformation",
        "prospection_automation",
        9,
        "Transformation digitale complète avec budget 50M€ et recrutement commercial. Timing parfait pour "
        "proposer automatisation prospection.",
        "2026-01-27T09:05:00Z",
    ),
]

DEMO_CONTACTS = {
    "Le Figaro": RawContact(
        email="jean.dupont@lefigaro.fr",
        first_name="Jean",
        last_name="Dupont",
        position="Directeur Commercial",
        linkedin="https://linkedin.com/in/jean-dupont",
        confidence=92,
        seniority="executive",
    ),
    "Ouest-France": RawContact(
        email="marie.martin@ouest-france.fr",
        first_name="Marie",
        last_name="Martin",
        position="Directrice de la Rédaction",
        linkedin="https://linkedin.com/in/marie-martin",
        confidence=88,
        seniority="executive",
    ),
    "Groupe Marie Claire": RawContact(
        email="pierre.durand@marieclaire.fr",
        first_name="Pierre",
        last_name="Durand",
        position="Chief Digital Officer",
        linkedin="https://linkedin.com/in/pierre-durand",
        confidence=85,
        seniority="executive",
    ),
}

DEMO_EMAILS = {
    "opp-001": EmailDraft(
        subject="Une idée pour votre équipe commerciale",
        body="""Jean,

J'ai vu l'annonce de vos recrutements commerciaux. Avec 10 nouveaux profils à intégrer, vous allez sans doute chercher à maximiser leur efficacité rapidement.

Nous accompagnons des groupes de presse comme le vôtre pour automatiser la prospection : identification des bons contacts, emails personnalisés par IA, relances intelligentes. Nos clients gagnent en moyenne 2h par commercial par jour.

Un call de 15 minutes pour en discuter ?

Alexandre""",
    ),
    "opp-002": EmailDraft(
        subject="Automatiser les mises en page du nouveau mag ?",
        body="""Marie,

Félicitations pour le lancement du magazine lifestyle ! Créer une nouvelle identité visuelle et la maintenir sur le long terme, c'est un défi.

Nous avons développé des outils d'IA générative qui automatisent 70% des mises en page courantes, tout en gardant votre charte graphique. Vos équipes se concentrent sur les pages créatives, l'IA gère le reste.

Intéressée par une démo de 15 minutes ?

Alexandre""",
    ),
    "opp-003": EmailDraft(
        subject="Votre transformation digitale et la prospection",
        body="""Pierre,

Votre annonce sur la transformation digitale du groupe m'a interpellé. Avec 20 recrutements prévus côté commercial, l'efficacité de la prospection va devenir clé.

Nous avons accompagné des groupes médias similaires pour automatiser leur prospection : IA qui qualifie les leads, emails personnalisés à grande échelle, CRM enrichi automatiquement. Résultat : +40% de rendez-vous qualifiés.

15 minutes pour vous montrer comment ?

Alexandre""",
    ),
}


def _demo_contact(publisher: str) -> dict[str, Any] | None:
    raw = DEMO_CONTACTS.get(publisher)
    if raw is None:
        return None
    scored = score_contact(raw, is_large_company(resolve_domain(publisher)))
    return scored.to_dict(company=publisher)


def get_demo_opportunities() -> list[WeeklyOpportunity]:
    by_url = {a.url: a for a in DEMO_ARTICLES}
    out: list[WeeklyOpportunity] = []
    for opp_id, url, opp_type, score, reasoning, detected_at in DEMO_OPPORTUNITIES:
        article = by_url[url]
        out.append(
            WeeklyOpportunity(
                id=opp_id,
                article=article,
                opportunity=DetectedOpportunity(type=opp_type, score=score, reasoning=reasoning),
                detected_at=detected_at,
                contact=_demo_contact(article.publisher),
                email=DEMO_EMAILS.get(opp_id),
            )
        )
    return out
