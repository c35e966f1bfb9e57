"""
Health analysis over a trailing window (30 days by default).
- mood trend: mean mood value (missing values count as 0)
- most common symptom with its count
- meal count + most common meal type
- raw counts per record kind
Ties go to the value seen first in newest-first order.
"""
import datetime
import logging
from collections import Counter

from sqlalchemy.orm import Session

from healthchat.core.config import get_analysis_window_days
from healthchat.core.records import RECORD_KINDS, RecordTracker, to_utc

logger = logging.getLogger(__name__)

EXPORT_STUB_MESSAGE = (
    "PDF export feature coming soon! This would generate a comprehensive "
    "health report for your doctor."
)


def fetch_window(db: Session, user_id: str, now: datetime.datetime | None = None, window_days: int | None = None) -> dict:
    days = window_days if window_days is not None else get_analysis_window_days()
    since = to_utc(now) - datetime.timedelta(days=days)
    return {
        name: RecordTracker(kind).list(db, user_id, limit=None, since=since)
        for name, kind in RECORD_KINDS.items()
    }


def generate_insights(data: dict, window_days: int = 30) -> list[dict]:
    insights = []

    moods = data.get("moods") or []
    if moods:
        avg = sum((m.mood_value or 0) for m in moods) / len(moods)
        insights.append({
            "title": "Mood Trend",
            "content": f"Your average mood rating over the last {window_days} days is {avg:.1f}/10.",
            "kind": "mood",
            "value": round(avg, 1),
        })

    symptoms = data.get("symptoms") or []
    if symptoms:
        name, count = Counter(s.symptom_name for s in symptoms).most_common(1)[0]
        insights.append({
            "title": "Most Common Symptom",
            "content": f"{name} occurred {count} times in the last {window_days} days.",
            "kind": "symptom",
            "value": {"name": name, "count": count},
        })

    meals = data.get("meals") or []
    if meals:
        top = Counter(m.meal_type for m in meals).most_common(1)
        top_type = top[0][0] if top else "N/A"
        insights.append({
            "title": "Eating Patterns",
            "content": f"You've logged {len(meals)} meals this month. Most common: {top_type}.",
            "kind": "meal",
            "value": {"total": len(meals), "most_common": top_type},
        })

    return insights


def analyze(db: Session, user_id: str, now: datetime.datetime | None = None, window_days: int | None = None) -> dict:
    days = window_days if window_days is not None else get_analysis_window_days()
    data = fetch_window(db, user_id, now=now, window_days=days)
    summary = {name: len(rows) for name, rows in data.items()}
    logger.debug("Analysis for user %s over %s days: %s", user_id, days, summary)
    return {
        "windowDays": days,
        "insights": generate_insights(data, window_days=days),
        "summary": summary,
    }


def export_report(user_id: str) -> dict:
    """No document is generated yet."""
    logger.info("Report export requested by user %s (not implemented)", user_id)
    return {"success": False, "message": EXPORT_STUB_MESSAGE}
