"""CRUD operations over issues, suggestions and suggestion likes."""
from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import Forbidden, NotFound, ValidationFailure
from .keywords import PRIORITIES
from .models import Issue, Suggestion, SuggestionLike, utcnow
from .schemas import STATUSES

logger = logging.getLogger(__name__)

REQUIRED_ISSUE_FIELDS = ("title", "description", "category")


# --- ISSUES ---
def create_issue(db: Session, user_id: str, title: str, description: str, category: str,
                 subcategory: str = None, location: str = None, priority: str = None,
                 image_url: str = None) -> Issue:
    """Store a complaint exactly as the citizen submitted it."""
    values = {"title": title, "description": description, "category": category}
    missing = [f for f in REQUIRED_ISSUE_FIELDS if not (values[f] or "").strip()]
    if missing:
        raise ValidationFailure(f"Missing required field(s): {', '.join(missing)}")

    priority = priority or "medium"
    if priority not in PRIORITIES:
        raise ValidationFailure(f"Invalid priority: {priority}")

    issue = Issue(
        title=title.strip(),
        description=description.strip(),
        category=category.strip(),
        subcategory=subcategory or None,
        location=location or None,
        priority=priority,
        status="reported",
        image_url=image_url,
        user_id=user_id,
    )
    db.add(issue)
    db.commit()
    db.refresh(issue)
    logger.info("Issue %s stored (%s/%s, %s)", issue.id, issue.category, issue.subcategory, issue.priority)
    return issue


def get_issue(db: Session, issue_id: str) -> Issue:
    issue = db.get(Issue, issue_id)
    if issue is None:
        raise NotFound(f"Issue {issue_id} not found")
    return issue


def list_issues(db: Session, user_id: str = None, status: str = None, category: str = None,
                since: datetime = None) -> list[Issue]:
    query = select(Issue)
    if user_id:
        query = query.where(Issue.user_id == user_id)
    if status:
        query = query.where(Issue.status == status)
    if category:
        query = query.where(Issue.category == category)
    if since:
        query = query.where(Issue.created_at >= since)
    return list(db.scalars(query.order_by(Issue.created_at.desc())))


def recently_reported(db: Session, hours: int = 24) -> list[Issue]:
    since = datetime.now(timezone.utc) - timedelta(hours=hours)
    return list_issues(db, status="reported", since=since)


def update_issue_status(db: Session, issue_id: str, status: str) -> Issue:
    if status not in STATUSES:
        raise ValidationFailure(f"Invalid status: {status}")
    issue = get_issue(db, issue_id)
    issue.status = status
    issue.updated_at = utcnow()
    db.commit()
    db.refresh(issue)
    return issue


def delete_issue(db: Session, issue_id: str, user_id: str) -> None:
    """Delete an issue together with its suggestions and their likes."""
    issue = get_issue(db, issue_id)
    if issue.user_id != user_id:
        raise Forbidden("Only the citizen who reported an issue can delete it")
    db.delete(issue)
    db.commit()
    logger.info("Issue %s deleted with its suggestions", issue_id)


# --- SUGGESTIONS ---
def create_suggestion(db: Session, issue_id: str, user_id: str, content: str) -> Suggestion:
    if not (content or "").strip():
        raise ValidationFailure("Suggestion content is required")
    get_issue(db, issue_id)
    suggestion = Suggestion(issue_id=issue_id, user_id=user_id, content=content.strip(), likes=0)
    db.add(suggestion)
    db.commit()
    db.refresh(suggestion)
    return suggestion


def list_suggestions(db: Session, issue_id: str = None, user_id: str = None) -> list[Suggestion]:
    query = select(Suggestion)
    if issue_id:
        query = query.where(Suggestion.issue_id == issue_id)
    if user_id:
        query = query.where(Suggestion.user_id == user_id)
    return list(db.scalars(query.order_by(Suggestion.created_at.desc())))


def toggle_suggestion_like(db: Session, suggestion_id: str, user_id: str) -> tuple[Suggestion, bool]:
    """Like, or unlike when this citizen already liked it. Returns (suggestion, liked)."""
    suggestion = db.get(Suggestion, suggestion_id)
    if suggestion is None:
        raise NotFound(f"Suggestion {suggestion_id} not found")

    existing = db.scalars(
        select(SuggestionLike).where(
            SuggestionLike.suggestion_id == suggestion_id, SuggestionLike.user_id == user_id
        )
    ).first()

    if existing:
        db.delete(existing)
        suggestion.likes = max(suggestion.likes - 1, 0)
        liked = False
    else:
        db.add(SuggestionLike(suggestion_id=suggestion_id, user_id=user_id))
        suggestion.likes += 1
        liked = True

    db.commit()
    db.refresh(suggestion)
    return suggestion, liked
