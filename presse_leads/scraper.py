"""
Union Presse homepage scraper.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from .config import DEFAULT_UNION_PRESSE_URL
from .types import Article, utc_now_iso
from .web import absolute_url, clean_text, fetch_url

logger = logging.getLogger(__name__)

CARD_SELECTOR = "article, .node--type-article, .views-row"
TITLE_SELECTOR = "h2 a, h3 a, .field--name-title a, .node__title a"
SUMMARY_SELECTOR = ".field--name-body, .node__content p, .field--type-text-with-summary"
BODY_SELECTOR = ".field--name-body, .node__content, article .content"

MAX_SUMMARY_CHARS = 300
MAX_BODY_CHARS = 2000
UNKNOWN_PUBLISHER = "Non identifié"

# Checked in order against the headline (case-insensitive substring).
KNOWN_PUBLISHERS = [
    "Auto Plus", "Haute Fidélité", "Libération", "Premiere", "AUTOhebdo",
    "L'Equipe", "L'Équipe", "Voyages & Hôtels de Rêve", "Le Figaro",
    "Le Monde", "Paris Match", "Marie Claire", "Elle", "GQ", "Vogue",
    "Ouest-France", "Le Parisien", "Les Echos", "La Tribune", "Capital",
    "Challenges", "L'Express", "Le Point", "Marianne", "Télérama",
    "Courrier International", "Sciences et Avenir", "Ca m'intéresse",
    "Ça m'intéresse", "Geo", "GEO", "National Geographic", "Historia",
    "Première", "Téléstar", "Télé 7 Jours", "TV Magazine", "Grazia",
    "Closer", "Voici", "Gala", "Public", "France Football", "So Foot",
    "Rock & Folk", "Les Inrockuptibles", "Technikart", "Beaux Arts",
    "Connaissance des Arts", "Art Press", "Reworld Media", "Prisma Media",
    "Alternatives Economiques", "Marie France", "ELLE", "Harper's Bazaar",
]

_LEADING_CAPITALISED = re.compile(r"^([A-ZÀ-Ÿ][a-zà-ÿ]*(?:\s+[A-ZÀ-Ÿ][a-zà-ÿ]*)*)")


class ScrapeError(RuntimeError):
    pass


def extract_publisher(title: str) -> str:
    low = (title or "").lower()
    for publisher in KNOWN_PUBLISHERS:
        if publisher.lower() in low:
            return publisher

    # "Publisher does something": take the leading capitalised words
    m = _LEADING_CAPITALISED.match(title or "")
    if m and len(m.group(1)) > 2:
        return m.group(1)

    return UNKNOWN_PUBLISHER


def parse_homepage(html: str, base_url: str = DEFAULT_UNION_PRESSE_URL, scraped_at: Optional[str] = None) -> list[Article]:
    scraped_at = scraped_at or utc_now_iso()
    soup = BeautifulSoup(html, "lxml")
    articles: list[Article] = []

    for card in soup.select(CARD_SELECTOR):
        link = card.select_one(TITLE_SELECTOR)
        if link is None:
            continue
        title = clean_text(link.get_text())
        href = link.get("href")
        if not title or not href:
            continue

        summary_el = card.select_one(SUMMARY_SELECTOR)
        summary = clean_text(summary_el.get_text())[:MAX_SUMMARY_CHARS] if summary_el else ""

        img = card.select_one("img")
        image_url = absolute_url(base_url, img.get("src")) if img else None

        articles.append(
            Article(
                url=absolute_url(base_url, href),
                title=title,
                summary=summary,
                publisher=extract_publisher(title),
                image_url=image_url,
                scraped_at=scraped_at,
            )
        )

    # Nested cards (".views-row article") yield the same link twice
    seen = set()
    unique: list[Article] = []
    for a in articles:
        if a.url in seen:
            continue
        seen.add(a.url)
        unique.append(a)
    return unique


def scrape_union_presse(base_url: str = DEFAULT_UNION_PRESSE_URL, timeout_s: int = 15) -> list[Article]:
    html = fetch_url(base_url, timeout_s=timeout_s, use_cache=False)
    if not html:
        raise ScrapeError(f"Failed to fetch {base_url}")
    articles = parse_homepage(html, base_url=base_url)
    logger.info("Scraped %d articles from %s", len(articles), base_url)
    return articles


def scrape_article_details(url: str, use_cache: bool = True) -> str:
    """Full text of one article page (truncated), or "" if unavailable."""
    html = fetch_url(url, use_cache=use_cache)
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    parts = [el.get_text() for el in soup.select(BODY_SELECTOR)]
    return clean_text(" ".join(parts))[:MAX_BODY_CHARS]
