# --- FEATURE FAQ ---
# Questions about the platform itself; answered before anything else.
FEATURE_FAQ = [
    (
        ["status tracker", "where find status", "track location", "dashboard", "find tracker"],
        """**Finding the Status Tracker**

The Status Tracker lives in the **My Reports** section of your dashboard:

1. Open the main dashboard
2. Choose "My Reports" in the navigation menu
3. Every complaint is listed with its current status

Status colours: red = reported, yellow = in progress, green = resolved.""",
    ),
    (
        ["upload image", "attach photo", "add picture", "image support", "photo upload"],
        """**Image Upload**

You can attach a photo when you submit a complaint. Use the "Upload Images" field of the
complaint form. JPG, PNG and other common formats are accepted, up to 5MB per image.

Clear, well-lit photos with some surrounding context help the authorities the most, and the
assistant will suggest a category from the photo.""",
    ),
    (
        ["voice to text", "voice input", "speak", "microphone", "illiterate", "audio input"],
        """**Voice Input**

Look for the microphone icon in the complaint form and in this chat. Press it, speak in
Telugu, Hindi or English, and press stop when you are done. The text appears in the field
so you can review it before submitting.""",
    ),
    (
        ["anonymous", "private complaint", "hide identity", "confidential", "secret reporting"],
        """**Anonymous Complaints**

Tick "File Anonymous Complaint" while submitting. Your name and contact details are hidden
from public view and only the complaint content and location are shown. You still receive a
tracking ID. This is recommended for corruption complaints.""",
    ),
    (
        ["complaint categories", "issue types", "what can report", "report types"],
        """**Complaint Categories**

Municipal services:
- Roads and potholes -> GHMC Roads Department
- Water supply -> Hyderabad Water Board
- Waste management -> GHMC Sanitation Department
- Streetlights -> GHMC Electrical Department
- Drainage and sewage -> GHMC Drainage Department

Governance:
- Bribery, misuse of power, illegal activities -> Anti-Corruption Bureau

Each complaint is routed to the right department automatically.""",
    ),
    (
        ["notifications", "alerts", "sms updates", "email updates", "how get notified"],
        """**Notifications**

You are notified when a complaint is submitted and every time its status changes
(reported -> in progress -> resolved). Departments receive a daily reminder for complaints
that are still waiting. Notification preferences are under Settings -> Notifications.""",
    ),
    (
        ["ai features", "smart suggestions", "auto category", "ai help"],
        """**AI Features**

- Category and priority suggestions while you type your complaint
- Category suggestions from uploaded photos
- Emergency detection: urgent wording raises the priority automatically
- Step-by-step guidance in this chat when you say "report an issue"
- Personal status answers: ask "track my complaints" to see yours.""",
    ),
]

# --- GENERAL FAQ ---
# Used when the model is unavailable.
GENERAL_FAQ = [
    (
        ["submit", "report", "complaint", "issue", "how to", "file"],
        """**How to Submit a Complaint**

1. Click "Report Issues" on the dashboard
2. Pick a category: roads, water, waste, streetlights, drainage or corruption
3. Describe the problem clearly
4. Add the location (district, pincode or landmark)
5. Upload a photo if you have one
6. Submit and keep your tracking ID

Mention any safety risk in the description; it raises the priority.""",
    ),
    (
        ["track", "status", "follow", "check", "my complaint", "progress"],
        """**Tracking Your Complaint**

Open "My Reports" on your dashboard, or ask me "track my complaints".

- Reported: received, being reviewed
- In progress: the authority is working on it
- Resolved: the issue has been fixed

Municipal issues usually take 3-7 business days, corruption cases 7-15.""",
    ),
    (
        ["edit", "update", "change", "modify", "delete", "remove"],
        """**Managing Your Complaints**

Open the complaint in "My Reports". You can delete a complaint you reported; its suggestions
are removed with it. The category cannot be changed after submission, so file a new
complaint for major changes.""",
    ),
    (
        ["authority", "contact", "phone", "email", "office"],
        """**Authority Contacts**

Municipal:
- GHMC: 155304
- Water Board: 155313
- Electricity: 1912

Corruption:
- ACB Telangana: 040-2325-1555
- Vigilance: 040-2346-1151

Emergency: Fire 101, Ambulance 108, Police 100.
For urgent issues call first, then file the complaint.""",
    ),
    (
        ["category", "type", "issues", "what can report", "kind"],
        """**What You Can Report**

- Roads: potholes, broken footpaths, traffic signals
- Water: leakage, shortage, contamination
- Waste: missed collection, illegal dumping, overflowing bins
- Streetlights and power issues
- Drainage: blockages, overflow, open manholes
- Parks and unauthorized construction
- Corruption: bribery, misuse of power or funds

Private disputes and court matters cannot be handled here.""",
    ),
    (
        ["anonymous", "privacy", "identity", "confidential", "secret"],
        """**Privacy**

Your identity is shared only with the authority handling the complaint. Choose anonymous
reporting for sensitive cases; your name and contact details then never appear in public
complaint tracking.""",
    ),
]

HELP_RESPONSE = """**How I Can Help**

- Guide you through submitting a complaint
- Tell you the status of your complaints
- Explain categories and which authority handles them
- Share contact numbers and escalation paths

Try: "track my complaints", "report an issue" or "contact info for water problems"."""

WELCOME_RESPONSE = """**Welcome to your Civic Assistant!**

I can help you report civic issues, track your complaints and find the right authority.

- Type "report an issue" for guided submission
- Ask "track my complaints" for your personal status
- Ask "how to report a pothole?" or "corruption reporting process"

What issue would you like to address today?"""


def match(table, message: str):
    lower = message.lower()
    for keywords, response in table:
        if any(k in lower for k in keywords):
            return response
    return None


def feature_answer(message: str):
    return match(FEATURE_FAQ, message)


def general_answer(message: str) -> str:
    found = match(GENERAL_FAQ, message)
    if found:
        return found
    lower = message.lower()
    if "help" in lower or "support" in lower:
        return HELP_RESPONSE
    return WELCOME_RESPONSE
