import logging
import time

from . import faq, store
from .analytics import days_since, user_complaint_data
from .errors import NetworkFailure, ParseFailure, ValidationFailure
from .schemas import ChatResponse

logger = logging.getLogger(__name__)

CHAT_PROMPT = """You are an AI assistant for the "Civic Crowdsourced Reporting System" in Telangana.

Your capabilities:
1. Answer questions about website features (Status Tracker location, image upload, voice input, etc.)
2. Provide personalized complaint status using real user data
3. Help users navigate the platform efficiently
4. Guide through complaint reporting with smart suggestions
5. Connect users to the right authorities with specific contact information

Key features:
- Status Tracker: In "My Reports" dashboard section
- Image Upload: Available during complaint submission (5MB limit)
- Voice-to-Text: Microphone icon for audio input
- Anonymous Mode: For sensitive/corruption complaints
- Smart Categorization: AI suggests categories and priorities

Authorities:
- Municipal: GHMC (155304), Water Board (155313), Electricity (1912)
- Corruption: ACB Telangana (040-2325-1555), Vigilance (040-2346-1151)

Be conversational, helpful, and specific. Use user data when available."""

# query word -> (stored subcategory, label, authority)
CATEGORY_QUERIES = {
    "road": ("potholes", "Roads", "GHMC Road Department: 155304"),
    "water": ("water", "Water Supply", "Hyderabad Water Board: 155313"),
    "waste": ("trash", "Waste Management", "GHMC Sanitation: 155304"),
    "drainage": ("drainage", "Drainage", "GHMC Drainage: 155304"),
    "electric": ("streetlights", "Electricity", "Electricity Board: 1912"),
}


def new_conversation_id() -> str:
    return f"conv_{int(time.time() * 1000)}"


def _status_overview(data: dict) -> str:
    if data["total_issues"] == 0:
        return (
            "**Your Complaint Status:**\n\n"
            "You haven't submitted any complaints yet. Click \"Report Issues\" to file your first one, "
            "or say \"report an issue\" and I'll guide you.\n\n"
            "Once you have complaints, the Status Tracker in \"My Reports\" shows their progress."
        )

    lines = [
        "**Your Current Status Overview:**",
        "",
        f"**Summary:** {data['total_issues']} total complaints",
        f"- **{data['pending_issues']} Pending** (awaiting review)",
        f"- **{data['in_progress_issues']} In Progress** (being resolved)",
        f"- **{data['resolved_issues']} Resolved** (completed)",
    ]
    recent = data["recent_issue"]
    if recent:
        lines += ["", f"**Latest:** \"{recent.title}\" ({recent.status}) - {recent.category}"]
    lines += ["", "For details open \"My Reports\" in your dashboard, that's where the Status Tracker lives."]
    if data["pending_issues"]:
        lines += [f"Average response time: {data['avg_response_time']}."]
    return "\n".join(lines)


def _resolved(data: dict) -> str:
    if data["resolved_issues"] == 0:
        if data["pending_issues"]:
            return (
                "**Your Resolved Complaints:**\n\nNone yet, but you have "
                f"{data['pending_issues']} pending complaint(s) being worked on."
            )
        return "**Your Resolved Complaints:**\n\nNone yet. Ready to report an issue? I can guide you."

    lines = [f"**Your Resolved Complaints ({data['resolved_issues']}):**", ""]
    for n, issue in enumerate(data["resolved_list"], 1):
        lines.append(f"{n}. **{issue.title}**")
        lines.append(f"   Category: {issue.category} | Priority: {issue.priority}")
        lines.append(f"   Resolved: {issue.updated_at:%Y-%m-%d}")
        lines.append("")
    if data["resolved_issues"] > 3:
        lines.append(f"...and {data['resolved_issues'] - 3} more resolved complaints.")
    return "\n".join(lines).rstrip()


def _pending(data: dict) -> str:
    if data["pending_issues"] == 0:
        text = "**Pending Complaints Count:**\n\nYou have **0 pending complaints** right now."
        if data["resolved_issues"]:
            text += f" {data['resolved_issues']} of your complaints have been resolved."
        return text

    lines = [f"**Your Pending Complaints ({data['pending_issues']}):**", ""]
    for n, issue in enumerate(data["pending_list"], 1):
        lines.append(f"{n}. **{issue.title}** ({issue.category})")
        lines.append(f"   Priority: {issue.priority} | Submitted: {days_since(issue.created_at)} days ago")
        lines.append("")
    lines.append("Check \"My Reports\" in your dashboard for real-time updates.")
    return "\n".join(lines)


def _category(lower: str, data: dict):
    for word, (key, label, authority) in CATEGORY_QUERIES.items():
        if word in lower and data["category_stats"].get(key):
            count = data["category_stats"][key]
            return (
                f"**Your {label} Complaints:**\n\n"
                f"You've reported **{count} {label.lower()} issue(s)**.\n\n"
                f"Relevant authority: {authority}"
            )
    return None


def user_answer(message: str, data: dict):
    """Answers built from the citizen's own complaints, or None."""
    lower = message.lower()
    if any(w in lower for w in ("status", "track", "my complaint")):
        return _status_overview(data)
    if any(w in lower for w in ("resolved", "completed", "fixed")):
        return _resolved(data)
    if "pending" in lower or "how many" in lower:
        return _pending(data)
    if any(w in lower for w in CATEGORY_QUERIES):
        return _category(lower, data)
    return None


def user_context(data: dict) -> str:
    recent = data["recent_issue"]
    latest = f"\"{recent.title}\" ({recent.status})" if recent else "None"
    return (
        "\n\nUser context:\n"
        f"- Total complaints: {data['total_issues']} ({data['pending_issues']} pending, "
        f"{data['in_progress_issues']} in progress, {data['resolved_issues']} resolved)\n"
        f"- Categories used: {', '.join(data['category_stats']) or 'none'}\n"
        f"- Has uploaded images: {'Yes' if data['has_images'] else 'No'}\n"
        f"- Average resolution time: {data['avg_response_time']}\n"
        f"- Most recent: {latest}"
    )


def answer_chat(message: str, llm, db=None, user_id: str = None, conversation_id: str = None) -> ChatResponse:
    """FAQ first, then the citizen's own data, then the model, then the general FAQ."""
    if not (message or "").strip():
        raise ValidationFailure("Message is required")
    conversation_id = conversation_id or new_conversation_id()

    answer = faq.feature_answer(message)

    data = None
    if answer is None and user_id and db is not None:
        data = user_complaint_data(
            store.list_issues(db, user_id=user_id), store.list_suggestions(db, user_id=user_id)
        )
        answer = user_answer(message, data)

    if answer is None:
        prompt = CHAT_PROMPT + (user_context(data) if data else "")
        try:
            answer = llm.ask(prompt, message, max_tokens=600, temperature=0.7)
        except (NetworkFailure, ParseFailure) as e:
            logger.warning("Chat model unavailable, using FAQ fallback: %s", e)
            answer = faq.general_answer(message)

    return ChatResponse(response=answer, conversation_id=conversation_id)
