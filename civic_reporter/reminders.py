import logging

from . import notify, store
from .analytics import issues_frame

logger = logging.getLogger(__name__)


def build_digest(department: str, issues) -> str:
    lines = [
        f"Dear {department},",
        "",
        f"{len(issues)} new complaint(s) were reported in the last 24 hours and are awaiting action:",
        "",
    ]
    for n, issue in enumerate(issues, 1):
        lines.append(f"{n}. [{issue.priority.upper()}] {issue.title}")
        lines.append(f"   Location: {issue.location or 'Not provided'}")
        lines.append(f"   Reported: {issue.created_at:%Y-%m-%d %H:%M} UTC")
        lines.append(f"   {issue.description}")
        lines.append("")
    lines.append("Please update the status of these complaints once work has started.")
    return "\n".join(lines)


def send_daily_reminders(db, send=None) -> dict:
    """Mail each department a digest of the complaints still waiting since yesterday."""
    send = send or notify.send_email
    issues = store.recently_reported(db)
    logger.info("Found %d reported issues from last 24 hours", len(issues))
    if not issues:
        return {"message": "No new reported issues found", "processed": 0, "results": []}

    df = issues_frame(issues)
    df["route"] = df["subcategory"].fillna(df["category"])
    # several labels can share a department; one digest each
    df["department"] = [notify.route_department(i.category, i.subcategory)["name"] for i in issues]

    results = []
    for name, group in df.groupby("department", sort=True):
        batch = [issues[i] for i in group.index]
        dept = notify.route_department(batch[0].category, batch[0].subcategory)
        route = ", ".join(sorted(group["route"].unique()))
        subject = f"Daily Reminder: {len(batch)} new {route} complaint(s) for {name}"
        result = {"category": route, "department": name, "count": len(batch), "success": True}
        try:
            send(dept["emails"], subject, build_digest(dept["name"], batch))
        except Exception as e:
            logger.error("Reminder for %s failed: %s", dept["name"], e)
            result.update(success=False, error=str(e))
        results.append(result)

    return {
        "message": "Daily reminders processed",
        "processed": len(issues),
        "results": results,
    }
