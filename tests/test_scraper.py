"""
Unit tests for the Union Presse scraper.
"""

from unittest.mock import patch

import pytest

from presse_leads.scraper import (
    UNKNOWN_PUBLISHER,
    ScrapeError,
    extract_publisher,
    parse_homepage,
    scrape_article_details,
    scrape_union_presse,
)

BASE_URL = "https://www.unionpresse.fr"

HOMEPAGE = """
<html><body>
<div class="views-row">
  <article>
    <h2><a href="/actualites/figaro-nouvelle-formule">Le Figaro   dévoile sa nouvelle formule</a></h2>
    <div class="field--name-body">Le quotidien
      modernise sa maquette.</div>
    <img src="/img/figaro.jpg">
  </article>
</div>
<article>
  <h3><a href="https://www.unionpresse.fr/actualites/gq">GQ lance un hors-série</a></h3>
</article>
<article><p>Pas de lien ici</p></article>
</body></html>
"""


class TestExtractPublisher:
    def test_known_publisher(self):
        assert extract_publisher("Le Figaro dévoile sa nouvelle formule") == "Le Figaro"

    def test_known_publisher_is_case_insensitive(self):
        assert extract_publisher("rentrée chargée pour capital") == "Capital"

    def test_leading_capitalised_words(self):
        assert extract_publisher("Nouveau Magazine arrive en kiosque") == "Nouveau Magazine"

    def test_unknown(self):
        assert extract_publisher("un titre sans majuscule") == UNKNOWN_PUBLISHER
        assert extract_publisher("Le x") == UNKNOWN_PUBLISHER
        assert extract_publisher("") == UNKNOWN_PUBLISHER


class TestParseHomepage:
    def test_cards(self):
        articles = parse_homepage(HOMEPAGE, base_url=BASE_URL, scraped_at="2026-01-29T09:00:00Z")

        assert [a.url for a in articles] == [
            "https://www.unionpresse.fr/actualites/figaro-nouvelle-formule",
            "https://www.unionpresse.fr/actualites/gq",
        ]
        figaro, gq = articles
        assert figaro.title == "Le Figaro dévoile sa nouvelle formule"
        assert figaro.summary == "Le quotidien modernise sa maquette."
        assert figaro.publisher == "Le Figaro"
        assert figaro.image_url == "https://www.unionpresse.fr/img/figaro.jpg"
        assert figaro.scraped_at == "2026-01-29T09:00:00Z"

        assert gq.publisher == "GQ"
        assert gq.summary == ""
        assert gq.image_url is None

    def test_empty_page(self):
        assert parse_homepage("<html><body></body></html>", base_url=BASE_URL) == []


class TestScrape:
    def test_fetch_failure_raises(self):
        with patch("presse_leads.scraper.fetch_url", return_value=None):
            with pytest.raises(ScrapeError):
                scrape_union_presse(BASE_URL)

    def test_scrape_homepage(self):
        with patch("presse_leads.scraper.fetch_url", return_value=HOMEPAGE) as mock_fetch:
            articles = scrape_union_presse(BASE_URL)
        assert len(articles) == 2
        assert mock_fetch.call_args.kwargs["use_cache"] is False

    def test_article_details(self):
        html = '<html><body><div class="field--name-body"><p>Texte   complet</p></div></body></html>'
        with patch("presse_leads.scraper.fetch_url", return_value=html):
            assert scrape_article_details("https://www.unionpresse.fr/a") == "Texte complet"

    def test_article_details_unavailable(self):
        with patch("presse_leads.scraper.fetch_url", return_value=None):
            assert scrape_article_details("https://www.unionpresse.fr/a") == ""
