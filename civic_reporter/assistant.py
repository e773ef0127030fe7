import asyncio
import logging

from .classifier import classify_complaint_text
from .guidance import DialogState, get_next_guidance
from .vision import analyze_complaint_image

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 1.0


class ComplaintAssistant:
    """Per-session helper state for someone filling in a complaint.

    Holds the current AI suggestions and the guidance dialog. Every text
    classification takes a sequence ticket; a reply is applied only if no newer
    request was issued while it was in flight.
    """

    def __init__(self, llm, debounce: float = DEBOUNCE_SECONDS,
                 classify=classify_complaint_text, analyze=analyze_complaint_image):
        self.llm = llm
        self.debounce = debounce
        self._classify = classify
        self._analyze = analyze
        self.suggestions = {}
        self.dialog = DialogState()
        self.is_analyzing = False
        self._text_busy = False
        self._image_busy = False
        self._latest = 0
        self._scheduled = None

    # --- TEXT ---
    async def analyze_text(self, title: str, description: str):
        if not (title or "").strip() and not (description or "").strip():
            return None

        self._latest += 1
        ticket = self._latest
        self._text_busy = self.is_analyzing = True
        try:
            result = await asyncio.to_thread(self._classify, title, description, self.llm)
        finally:
            if ticket == self._latest:
                self._text_busy = False
                self.is_analyzing = self._image_busy

        if ticket != self._latest:
            logger.debug("Dropping stale classification #%d (latest #%d)", ticket, self._latest)
            return None

        self.suggestions.update(
            category=result.category,
            subcategory=result.subcategory,
            priority=result.priority,
            confidence=result.confidence,
            reasoning=result.reasoning,
        )
        if result.priority == "high":
            logger.info("High priority complaint detected")
        return result

    def schedule_text_analysis(self, title: str, description: str) -> asyncio.Task:
        """Debounced analyze_text: restarting the timer on every keystroke."""
        if self._scheduled is not None and not self._scheduled.done():
            self._scheduled.cancel()
        self._scheduled = asyncio.create_task(self._debounced(title, description))
        return self._scheduled

    async def _debounced(self, title, description):
        await asyncio.sleep(self.debounce)
        return await self.analyze_text(title, description)

    # --- IMAGE ---
    async def analyze_image(self, data, mime_type: str):
        self._image_busy = self.is_analyzing = True
        try:
            result = await asyncio.to_thread(self._analyze, data, mime_type, self.llm)
        finally:
            self._image_busy = False
            self.is_analyzing = self._text_busy

        self.suggestions.update(
            category=result.suggested_category,
            subcategory=result.suggested_subcategory,
            confidence=result.confidence,
        )
        return result

    # --- DIALOG ---
    async def next_guidance(self, user_input: str = None):
        guidance, self.dialog = await asyncio.to_thread(get_next_guidance, self.dialog, user_input, self.llm)
        return guidance

    def accept_suggestion(self, field: str, value: str):
        self.suggestions[f"accepted_{field}"] = value

    def accepted(self) -> dict:
        prefix = "accepted_"
        return {k[len(prefix):]: v for k, v in self.suggestions.items() if k.startswith(prefix)}

    def reset(self):
        if self._scheduled is not None and not self._scheduled.done():
            self._scheduled.cancel()
        self._scheduled = None
        self.suggestions = {}
        self.dialog = DialogState()
        self.is_analyzing = False
        self._text_busy = self._image_busy = False
