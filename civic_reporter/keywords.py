# --- PRIORITY KEYWORDS ---
EMERGENCY_KEYWORDS = [
    "accident", "dead body", "fire", "explosion", "gas leak", "heavy water leakage",
    "collapsed building", "electric shock", "flooding", "burst pipe", "sewage overflow",
    "injured", "emergency", "urgent", "life threatening", "blocked ambulance",
    "traffic jam ambulance", "broken streetlight night", "deep pothole accident",
]

HIGH_PRIORITY_KEYWORDS = [
    "no water supply", "power outage", "road blockage", "bridge damage",
    "signal not working", "damaged footpath", "overflowing drain",
]

PRIORITIES = ("low", "medium", "high")


def combined_text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def has_emergency_keyword(text: str) -> bool:
    text = text.lower()
    return any(k in text for k in EMERGENCY_KEYWORDS)


def has_high_priority_keyword(text: str) -> bool:
    text = text.lower()
    return any(k in text for k in HIGH_PRIORITY_KEYWORDS)


def resolve_priority(text: str, suggested: str = "medium") -> str:
    """Emergency wording always wins over whatever priority was suggested."""
    if has_emergency_keyword(text):
        return "high"
    if has_high_priority_keyword(text):
        return "medium"
    return suggested if suggested in PRIORITIES else "medium"
