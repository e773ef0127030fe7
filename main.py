from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, Header, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session
import logging

from civic_reporter import config, media, notify, store
from civic_reporter.analytics import summarize
from civic_reporter.chatbot import answer_chat
from civic_reporter.classifier import classify_complaint_text
from civic_reporter.database import get_db, init_db
from civic_reporter.errors import AuthFailure, CivicReporterError, Forbidden, ValidationFailure
from civic_reporter.guidance import DialogState, get_next_guidance
from civic_reporter.llm import LLMClient
from civic_reporter.reminders import send_daily_reminders
from civic_reporter.schemas import (
    ChatRequest, ChatResponse, ClassifyRequest, ClassifyResponse, GuidanceRequest, GuidanceResponse,
    ImageAnalysisRequest, ImageAnalysisResult, IssueOut, LikeResult, StatusUpdate, SuggestionCreate,
    SuggestionOut,
)
from civic_reporter.vision import analyze_complaint_image

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("civic_reporter.api")

# ---------------- CLIENTS ----------------
llm = LLMClient()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# ---------------- APP ----------------
app = FastAPI(title="Civic Reporter API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/media", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="media")


@app.exception_handler(CivicReporterError)
async def civic_error(request: Request, exc: CivicReporterError):
    return JSONResponse(status_code=getattr(exc, "status_code", 500), content={"detail": str(exc)})


# ---------------- DEPENDENCIES ----------------
def get_llm():
    return llm


def current_user(x_user_id: str = Header(None)) -> str:
    """The auth gateway in front of us sets X-User-Id for signed-in citizens."""
    if not x_user_id or not x_user_id.strip():
        raise AuthFailure("Authentication required. Please log in.")
    return x_user_id.strip()


def optional_user(x_user_id: str = Header(None)):
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def current_operator(user_id: str = Depends(current_user), x_user_role: str = Header(None)) -> str:
    """Status changes belong to department staff; the gateway marks them with X-User-Role."""
    if (x_user_role or "").strip().lower() not in config.OPERATOR_ROLES:
        raise Forbidden("Only department staff can change an issue's status")
    return user_id


# ---------------- AI ROUTES ----------------
@app.post("/classify-complaint", response_model=ClassifyResponse)
def classify_complaint(body: ClassifyRequest, llm=Depends(get_llm)):
    description = body.description or body.text or ""
    if not body.title.strip() and not description.strip():
        raise ValidationFailure("Text is required for classification")

    result = classify_complaint_text(body.title, description, llm)
    return ClassifyResponse(**result.model_dump(), sequence=body.sequence)


@app.post("/analyze-complaint-image", response_model=ImageAnalysisResult)
def analyze_image(body: ImageAnalysisRequest, llm=Depends(get_llm)):
    if not body.image:
        raise ValidationFailure("Image data is required for analysis")
    return analyze_complaint_image(body.image, body.image_type, llm)


@app.post("/complaint-guidance", response_model=GuidanceResponse)
def complaint_guidance(body: GuidanceRequest, llm=Depends(get_llm)):
    state = DialogState(step=body.step, context=body.context)
    guidance, state = get_next_guidance(state, body.user_input, llm)
    return GuidanceResponse(**guidance.model_dump(), context=state.context)


@app.post("/ai-chatbot", response_model=ChatResponse)
def ai_chatbot(body: ChatRequest, llm=Depends(get_llm), db: Session = Depends(get_db)):
    return answer_chat(body.message, llm, db=db, user_id=body.user_id, conversation_id=body.conversation_id)


# ---------------- ISSUES ----------------
@app.post("/issues", response_model=IssueOut, status_code=201)
async def report_issue(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    subcategory: str = Form(None),
    location: str = Form(None),
    priority: str = Form(None),
    image: UploadFile = File(None),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    image_url = None
    if image is not None and image.filename:
        content = await image.read()
        try:
            key = media.save_issue_image(user_id, content, image.filename, image.content_type or "image/jpeg")
            image_url = media.public_url(key)
        except (ValidationFailure, OSError) as e:
            # Issue is still saved, just without the photo
            logger.error("Image upload failed for %s: %s", user_id, e)

    issue = store.create_issue(
        db, user_id,
        title=title, description=description, category=category, subcategory=subcategory,
        location=location, priority=priority, image_url=image_url,
    )
    notify.dispatch_emergency(issue)
    return issue


@app.get("/issues", response_model=list[IssueOut])
def list_issues(mine: bool = False, status: str = None, category: str = None,
                user_id=Depends(optional_user), db: Session = Depends(get_db)):
    if mine and not user_id:
        raise AuthFailure("Authentication required. Please log in.")
    return store.list_issues(db, user_id=user_id if mine else None, status=status, category=category)


@app.get("/issues/{issue_id}", response_model=IssueOut)
def get_issue(issue_id: str, db: Session = Depends(get_db)):
    return store.get_issue(db, issue_id)


@app.patch("/issues/{issue_id}/status", response_model=IssueOut)
def update_status(issue_id: str, body: StatusUpdate, user_id: str = Depends(current_operator),
                  db: Session = Depends(get_db)):
    logger.info("Status of %s set to %s by %s", issue_id, body.status, user_id)
    return store.update_issue_status(db, issue_id, body.status)


@app.delete("/issues/{issue_id}")
def delete_issue(issue_id: str, user_id: str = Depends(current_user), db: Session = Depends(get_db)):
    store.delete_issue(db, issue_id, user_id)
    return {"status": "deleted", "id": issue_id}


# ---------------- SUGGESTIONS ----------------
@app.post("/issues/{issue_id}/suggestions", response_model=SuggestionOut, status_code=201)
def add_suggestion(issue_id: str, body: SuggestionCreate, user_id: str = Depends(current_user),
                   db: Session = Depends(get_db)):
    return store.create_suggestion(db, issue_id, user_id, body.content)


@app.get("/suggestions", response_model=list[SuggestionOut])
def list_suggestions(issue_id: str = None, db: Session = Depends(get_db)):
    return store.list_suggestions(db, issue_id=issue_id)


@app.post("/suggestions/{suggestion_id}/like", response_model=LikeResult)
def like_suggestion(suggestion_id: str, user_id: str = Depends(current_user), db: Session = Depends(get_db)):
    suggestion, liked = store.toggle_suggestion_like(db, suggestion_id, user_id)
    return LikeResult(suggestion_id=suggestion.id, likes=suggestion.likes, liked=liked)


# ---------------- REPORTING ----------------
@app.get("/analytics")
def analytics(db: Session = Depends(get_db)):
    return summarize(store.list_issues(db))


@app.post("/daily-reminders")
def daily_reminders(db: Session = Depends(get_db)):
    return send_daily_reminders(db)


@app.get("/")
def health(): return {"status": "active"}
