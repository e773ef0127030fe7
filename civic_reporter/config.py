from dotenv import load_dotenv
import os

# ---------------- LOAD ENV ----------------
load_dotenv(override=True)

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///civic_reporter.db")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

RESEND_API_KEY = os.getenv("RESEND_API_KEY")
RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
NOTIFY_FROM_EMAIL = os.getenv("NOTIFY_FROM_EMAIL", "Civic Reports <reports@civic-reporter.local>")
DEFAULT_NOTIFY_EMAIL = os.getenv("DEFAULT_NOTIFY_EMAIL", "municipal@telangana.gov.in")

# Emergency dispatch hook, disabled when unset
EMERGENCY_WEBHOOK_URL = os.getenv("EMERGENCY_WEBHOOK_URL")

# X-User-Role values allowed to change issue status
OPERATOR_ROLES = [r.strip().lower() for r in os.getenv("OPERATOR_ROLES", "admin").split(",") if r.strip()]

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
