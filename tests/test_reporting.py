from datetime import datetime, timedelta, timezone

from civic_reporter import notify, store
from civic_reporter.analytics import days_since, summarize, user_complaint_data
from civic_reporter.reminders import build_digest, send_daily_reminders


def seed(db):
    a = store.create_issue(db, "u1", "Leak", "Pipe leaking", "municipal", subcategory="water", location="Ameerpet")
    b = store.create_issue(db, "u1", "Pothole", "Deep hole", "municipal", subcategory="potholes",
                           location="Ameerpet", priority="high", image_url="/media/x.jpg")
    c = store.create_issue(db, "u2", "Bribe at RTO", "Asked for money", "corruption")
    store.update_issue_status(db, b.id, "resolved")
    return a, b, c


def test_summarize(db):
    seed(db)
    stats = summarize(store.list_issues(db))

    assert stats["total"] == 3
    assert stats["by_status"] == {"reported": 2, "in-progress": 0, "resolved": 1}
    assert stats["resolution_rate"] == 33
    assert stats["by_category"] == {"municipal": 2, "corruption": 1}
    assert stats["by_priority"] == {"medium": 2, "high": 1}
    assert stats["top_locations"] == [{"location": "Ameerpet", "count": 2}]


def test_summarize_empty():
    stats = summarize([])
    assert stats["total"] == 0
    assert stats["resolution_rate"] == 0


def test_user_complaint_data(db):
    seed(db)
    data = user_complaint_data(store.list_issues(db, user_id="u1"))

    assert data["total_issues"] == 2
    assert data["pending_issues"] == 1
    assert data["resolved_issues"] == 1
    assert data["category_stats"] == {"water": 1, "potholes": 1}
    assert data["has_images"] is True
    assert data["avg_response_time"] == "3-5 days"


def test_days_since_handles_naive_values():
    now = datetime(2024, 5, 10, tzinfo=timezone.utc)
    assert days_since(datetime(2024, 5, 7), now=now) == 3
    assert days_since(now + timedelta(days=1), now=now) == 0


def test_route_department():
    assert notify.route_department("municipal", "water")["name"] == "Hyderabad Water Board"
    assert notify.route_department("corruption")["name"] == "Anti-Corruption Bureau"
    assert notify.route_department("municipal", "other")["name"] == "Municipal Corporation"


def test_digest_lists_each_issue(db):
    a, _, _ = seed(db)
    text = build_digest("Hyderabad Water Board", [a])
    assert text.startswith("Dear Hyderabad Water Board,")
    assert "1. [MEDIUM] Leak" in text
    assert "Location: Ameerpet" in text


def test_daily_reminders_grouped_by_department(db):
    seed(db)
    sent = []

    def send(to, subject, text):
        if to == ["acb@telangana.gov.in"]:
            raise RuntimeError("Resend failed: 500")
        sent.append((to, subject))

    summary = send_daily_reminders(db, send=send)

    assert summary["message"] == "Daily reminders processed"
    assert summary["processed"] == 2
    results = {r["category"]: r for r in summary["results"]}
    assert results["water"] == {"category": "water", "department": "Hyderabad Water Board",
                                "count": 1, "success": True}
    assert results["corruption"]["success"] is False
    assert "500" in results["corruption"]["error"]
    assert sent == [(["waterboard@telangana.gov.in"],
                     "Daily Reminder: 1 new water complaint(s) for Hyderabad Water Board")]


def test_daily_reminders_one_digest_per_department(db):
    store.create_issue(db, "u1", "Stray dogs", "Pack near school", "municipal", subcategory="other")
    store.create_issue(db, "u2", "Broken bench", "In the colony", "municipal")
    store.create_issue(db, "u3", "Leak", "Pipe leaking", "municipal", subcategory="water")
    sent = []

    summary = send_daily_reminders(db, send=lambda to, subject, text: sent.append(to))

    assert summary["processed"] == 3
    assert sorted(sent) == sorted([[notify.config.DEFAULT_NOTIFY_EMAIL], ["waterboard@telangana.gov.in"]])
    results = {r["department"]: r for r in summary["results"]}
    assert results["Municipal Corporation"]["count"] == 2
    assert results["Municipal Corporation"]["category"] == "municipal, other"


def test_daily_reminders_nothing_new(db):
    summary = send_daily_reminders(db, send=lambda *a: None)
    assert summary == {"message": "No new reported issues found", "processed": 0, "results": []}


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code
        self.text = "ok"

    def json(self):
        return {"id": "email-1"}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise notify.requests.HTTPError(f"{self.status_code}")


def test_send_email_posts_to_resend(monkeypatch):
    posted = {}

    def fake_post(url, headers=None, json=None, timeout=None):
        posted.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(200)

    monkeypatch.setattr(notify.config, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(notify.requests, "post", fake_post)

    assert notify.send_email(["a@b.in"], "Subject", "Body") == {"id": "email-1"}
    assert posted["headers"]["Authorization"] == "Bearer re_test"
    assert posted["json"]["to"] == ["a@b.in"]
    assert posted["timeout"] == 10


def test_dispatch_only_for_high_priority(db, monkeypatch):
    a, b, _ = seed(db)
    posted = []
    monkeypatch.setattr(notify.config, "EMERGENCY_WEBHOOK_URL", "http://dispatch.local/hook")
    monkeypatch.setattr(notify.requests, "post", lambda url, json=None, timeout=None: posted.append(json) or FakeResponse())

    assert notify.dispatch_emergency(a) is False
    assert notify.dispatch_emergency(b) is True
    assert posted[0]["department"] == "GHMC Roads Department"


def test_dispatch_failure_is_swallowed(db, monkeypatch):
    _, b, _ = seed(db)
    monkeypatch.setattr(notify.config, "EMERGENCY_WEBHOOK_URL", "http://dispatch.local/hook")
    monkeypatch.setattr(notify.requests, "post", lambda url, json=None, timeout=None: FakeResponse(503))
    assert notify.dispatch_emergency(b) is False
