from datetime import datetime, timezone

import pandas as pd

from .schemas import STATUSES

COLUMNS = ["id", "title", "category", "subcategory", "location", "priority", "status",
           "image_url", "user_id", "created_at", "updated_at"]


def as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back naive; they were written in UTC.
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def issues_frame(issues) -> pd.DataFrame:
    """One row per issue, in the order given."""
    return pd.DataFrame([{c: getattr(i, c) for c in COLUMNS} for i in issues], columns=COLUMNS)


def _counts(series: pd.Series) -> dict:
    return {str(k): int(v) for k, v in series.dropna().value_counts().items()}


def summarize(issues, top_n: int = 5) -> dict:
    df = issues_frame(issues)
    total = len(df)
    by_status = {s: int((df["status"] == s).sum()) for s in STATUSES}
    location_counts = df["location"].dropna().str.strip()
    location_counts = location_counts[location_counts != ""].value_counts().head(top_n)

    return {
        "total": total,
        "by_status": by_status,
        "resolution_rate": round(by_status["resolved"] / total * 100) if total else 0,
        "by_category": _counts(df["category"]),
        "by_subcategory": _counts(df["subcategory"]),
        "by_priority": _counts(df["priority"]),
        "top_locations": [{"location": k, "count": int(v)} for k, v in location_counts.items()],
    }


def user_complaint_data(issues, suggestions=()) -> dict:
    """Per-citizen statistics used by the chatbot. ``issues`` newest first."""
    issues = list(issues)
    df = issues_frame(issues)
    pending = df.index[df["status"] == "reported"]
    in_progress = df.index[df["status"] == "in-progress"]
    resolved = df.index[df["status"] == "resolved"]

    return {
        "issues": issues,
        "suggestions": list(suggestions),
        "total_issues": len(issues),
        "recent_issue": issues[0] if issues else None,
        "pending_issues": len(pending),
        "in_progress_issues": len(in_progress),
        "resolved_issues": len(resolved),
        "category_stats": _counts(df["subcategory"].fillna(df["category"])),
        "priority_stats": _counts(df["priority"]),
        "pending_list": [issues[i] for i in pending[:3]],
        "resolved_list": [issues[i] for i in resolved[:3]],
        "has_images": bool(df["image_url"].notna().any()),
        "avg_response_time": "3-5 days" if len(resolved) else "No data yet",
    }


def days_since(value: datetime, now: datetime = None) -> int:
    now = now or datetime.now(timezone.utc)
    return max((now - as_utc(value)).days, 0)
