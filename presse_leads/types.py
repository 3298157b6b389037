from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


RECOMMENDATION_THRESHOLD = 70


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class RawContact:
    """One person record as returned by the enrichment API."""

    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None
    linkedin: Optional[str] = None
    confidence: int = 0
    department: Optional[str] = None
    seniority: Optional[str] = None  # executive | senior | junior


@dataclass(frozen=True)
class ScoredContact:
    contact: RawContact
    relevance_score: int
    relevance_reason: str
    is_large_company: bool

    @property
    def is_recommended(self) -> bool:
        return self.relevance_score >= RECOMMENDATION_THRESHOLD

    @property
    def email(self) -> str:
        return self.contact.email

    @property
    def first_name(self) -> Optional[str]:
        return self.contact.first_name

    def to_dict(self, company: str = "") -> dict[str, Any]:
        c = self.contact
        return {
            "email": c.email,
            "first_name": c.first_name,
            "last_name": c.last_name,
            "job_title": c.position,
            "company": company,
            "linkedin_url": c.linkedin,
            "relevance_score": self.relevance_score,
            "relevance_reason": self.relevance_reason,
            "is_recommended": self.is_recommended,
            "is_large_company": self.is_large_company,
        }


@dataclass
class Article:
    url: str
    title: str
    summary: str = ""
    publisher: str = ""
    image_url: Optional[str] = None
    scraped_at: str = ""
    category: Optional[str] = None
    published_date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DetectedOpportunity:
    type: str
    score: int
    reasoning: str


@dataclass
class EmailDraft:
    subject: str
    body: str

    def to_dict(self) -> dict[str, str]:
        return {"subject": self.subject, "body": self.body}


class OpportunityStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    IGNORED = "ignored"


@dataclass
class WeeklyOpportunity:
    """
    One dashboard row: the article, what was detected in it, who to contact
    and the suggested email.
    """

    id: str
    article: Article
    opportunity: DetectedOpportunity
    detected_at: str
    contact: Optional[dict[str, Any]] = None
    email: Optional[EmailDraft] = None
    status: OpportunityStatus = OpportunityStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "article": self.article.to_dict(),
            "opportunity": {
                "id": self.id,
                "article_url": self.article.url,
                "opportunity_type": self.opportunity.type,
                "score": self.opportunity.score,
                "reasoning": self.opportunity.reasoning,
                "detected_at": self.detected_at,
            },
            "contact": self.contact,
            "email": self.email.to_dict() if self.email else None,
            "status": self.status.value,
        }
