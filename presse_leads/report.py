from typing import Any, Iterable

import pandas as pd

from .types import WeeklyOpportunity

FRAME_COLUMNS = [
    "id",
    "publisher",
    "title",
    "opportunity_type",
    "score",
    "status",
    "contact_email",
    "contact_title",
    "relevance_score",
    "is_recommended",
]


def opportunities_frame(items: Iterable[WeeklyOpportunity]) -> pd.DataFrame:
    rows = []
    for o in items:
        c = o.contact or {}
        rows.append(
            {
                "id": o.id,
                "publisher": o.article.publisher,
                "title": o.article.title,
                "opportunity_type": o.opportunity.type,
                "score": o.opportunity.score,
                "status": o.status.value,
                "contact_email": c.get("email", ""),
                "contact_title": c.get("job_title") or "",
                "relevance_score": c.get("relevance_score"),
                "is_recommended": bool(c.get("is_recommended", False)),
            }
        )
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def dashboard_stats(items: Iterable[WeeklyOpportunity]) -> dict[str, Any]:
    df = opportunities_frame(items)
    counts = df["status"].value_counts()
    avg = round(float(df["score"].mean()), 1) if len(df) else 0.0
    return {
        "total": int(len(df)),
        "pending": int(counts.get("pending", 0)),
        "sent": int(counts.get("sent", 0)),
        "ignored": int(counts.get("ignored", 0)),
        "with_contact": int((df["contact_email"] != "").sum()) if len(df) else 0,
        "avg_score": avg,
    }
