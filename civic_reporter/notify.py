import logging

import requests

from . import config

logger = logging.getLogger(__name__)

# --- DEPARTMENTS ---
DEPARTMENTS = {
    "potholes": {"name": "GHMC Roads Department", "emails": ["ghmc.roads@telangana.gov.in"]},
    "streetlights": {"name": "GHMC Electrical Department", "emails": ["ghmc.electrical@telangana.gov.in"]},
    "water": {"name": "Hyderabad Water Board", "emails": ["waterboard@telangana.gov.in"]},
    "trash": {"name": "GHMC Sanitation Department", "emails": ["ghmc.sanitation@telangana.gov.in"]},
    "construction": {"name": "GHMC Engineering Department", "emails": ["ghmc.engineering@telangana.gov.in"]},
    "parks": {"name": "GHMC Parks & Recreation", "emails": ["ghmc.parks@telangana.gov.in"]},
    "corpse": {"name": "GHMC Health Department", "emails": ["ghmc.health@telangana.gov.in"]},
    "drainage": {"name": "GHMC Drainage Department", "emails": ["ghmc.drainage@telangana.gov.in"]},
    "corruption": {"name": "Anti-Corruption Bureau", "emails": ["acb@telangana.gov.in"]},
}


def route_department(category: str, subcategory: str = None) -> dict:
    """Pick the department for a complaint, most specific label first."""
    for key in (subcategory, category):
        if key and key.lower() in DEPARTMENTS:
            return DEPARTMENTS[key.lower()]
    return {"name": "Municipal Corporation", "emails": [config.DEFAULT_NOTIFY_EMAIL]}


# --- EMAIL (Resend) ---
def send_email(to: list, subject: str, text: str) -> dict:
    if not config.RESEND_API_KEY:
        raise RuntimeError("RESEND_API_KEY missing")

    payload = {
        "from": config.NOTIFY_FROM_EMAIL,
        "to": to,
        "subject": subject,
        "text": text,
    }
    r = requests.post(
        config.RESEND_API_URL,
        headers={"Authorization": f"Bearer {config.RESEND_API_KEY}", "Content-Type": "application/json"},
        json=payload,
        timeout=10,
    )
    if r.status_code not in (200, 201, 202):
        raise RuntimeError(f"Resend failed: {r.status_code} {r.text}")
    return r.json()


# --- EMERGENCY DISPATCH ---
def dispatch_emergency(issue) -> bool:
    """Forward a high priority complaint to the dispatch hook. Never raises."""
    if issue.priority != "high" or not config.EMERGENCY_WEBHOOK_URL:
        return False
    try:
        requests.post(config.EMERGENCY_WEBHOOK_URL, json={
            "report_id": issue.id,
            "category": issue.category,
            "subcategory": issue.subcategory,
            "location": issue.location,
            "issue": f"{issue.title}. {issue.description}",
            "priority": issue.priority,
            "department": route_department(issue.category, issue.subcategory)["name"],
        }, timeout=3).raise_for_status()
    except requests.RequestException as e:
        logger.error("Emergency dispatch failed for %s: %s", issue.id, e)
        return False
    logger.info("Emergency dispatch sent for %s", issue.id)
    return True
