"""
Publisher name -> email domain lookup.

Article publishers are free text scraped from headlines, so the lookup is
exact first, then a case-insensitive substring match in either direction.
"""

from types import MappingProxyType
from typing import Mapping, Optional


# Order matters: the substring pass returns the first entry that matches.
PUBLISHER_DOMAINS: Mapping[str, str] = MappingProxyType(
    {
        "Auto Plus": "reworldmedia.com",
        "AUTOhebdo": "reworldmedia.com",
        "Reworld Media": "reworldmedia.com",
        "Haute Fidélité": "hautefidelite.fr",
        "Libération": "liberation.fr",
        "Premiere": "prismamedia.com",
        "Première": "prismamedia.com",
        "L'Equipe": "lequipe.fr",
        "L'Équipe": "lequipe.fr",
        "Voyages & Hôtels de Rêve": "voyagesethoteldereve.fr",
        "Le Figaro": "lefigaro.fr",
        "Ouest-France": "ouest-france.fr",
        "Marie Claire": "marieclaire.fr",
        "Groupe Marie Claire": "marieclaire.fr",
        "Prisma Media": "prismamedia.com",
        "GQ": "prismamedia.com",
        "GQ France": "prismamedia.com",
        "Capital": "prismamedia.com",
        "Alternatives Economiques": "alternatives-economiques.fr",
        "Marie France": "mariefrance.fr",
        "ELLE": "lagardere.com",
        "Harper's Bazaar": "cmimedia.fr",
        "Harper's Bazaar France": "cmimedia.fr",
    }
)

# Groups big enough to have dedicated commercial / marketing / digital
# leadership. Everything else is scored with the small-company table.
LARGE_PUBLISHER_DOMAINS = frozenset(
    {
        "lefigaro.fr",
        "ouest-france.fr",
        "prismamedia.com",
        "reworldmedia.com",
        "lagardere.com",
        "lequipe.fr",
        "liberation.fr",
        "marieclaire.fr",
        "cmimedia.fr",
    }
)


class DomainRegistry:
    def __init__(self, mapping: Mapping[str, str]):
        self._exact = dict(mapping)
        self._lowered = tuple((name.lower(), domain) for name, domain in mapping.items())

    def __len__(self) -> int:
        return len(self._exact)

    def resolve(self, publisher: str) -> Optional[str]:
        if not publisher or not publisher.strip():
            return None

        domain = self._exact.get(publisher)
        if domain:
            return domain

        needle = publisher.lower()
        for name, domain in self._lowered:
            if needle in name or name in needle:
                return domain
        return None


_registry = DomainRegistry(PUBLISHER_DOMAINS)


def resolve_domain(publisher: str) -> Optional[str]:
    """Return the email domain for a publisher name, or None if unknown."""
    return _registry.resolve(publisher)


def is_large_company(domain: Optional[str]) -> bool:
    return bool(domain) and domain.lower() in LARGE_PUBLISHER_DOMAINS
