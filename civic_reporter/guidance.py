from dataclasses import dataclass, field
import json
import logging

from pydantic import ValidationError

from .errors import NetworkFailure, ParseFailure
from .schemas import DIALOG_STEPS, Guidance, RemoteGuidance, drop_nulls

logger = logging.getLogger(__name__)

GUIDANCE_PROMPT = """You are a helpful AI assistant for the Civic Crowdsourced Reporting System in Telangana.

Your role is to guide users through reporting civic complaints step by step. Be conversational, helpful, and specific to Telangana's civic issues.

Steps flow:
1. start -> category selection
2. category -> detailed description
3. description -> location gathering
4. location -> priority assessment
5. priority -> submission

Categories:
- Municipal issues: water supply, roads/potholes, streetlights, waste management, drainage, parks, construction issues, corpse removal
- Political corruption: bribery, misuse of power, illegal activities

Always respond ONLY in JSON format:
{
  "message": "conversational response to user",
  "suggestedActions": ["action1", "action2", "action3"],
  "nextStep": "next step name",
  "categoryGuess": "if applicable",
  "priorityGuess": "if emergency detected"
}

Be encouraging and make the process feel simple."""

FALLBACK_GUIDANCE = {
    "start": Guidance(
        message="Hello! I'm here to help you report your civic complaint. What type of issue would you like to report today?",
        suggested_actions=["Municipal issue (roads, water, waste)", "Political corruption case", "Not sure - describe the problem"],
        next_step="category",
    ),
    "category": Guidance(
        message="Great! Now please describe your issue in detail. What exactly is the problem and how is it affecting you or your community?",
        suggested_actions=["Describe the issue", "Upload a photo", "Record voice description"],
        next_step="description",
    ),
    "description": Guidance(
        message="Thank you for the details. Where exactly is this issue located? Please provide the area, street name, district, or pincode.",
        suggested_actions=["Enter specific address", "Use current location", "Provide nearby landmarks"],
        next_step="location",
    ),
    "location": Guidance(
        message="Perfect! Based on your description, I'll help assess the priority level. Is this an urgent situation that needs immediate attention?",
        suggested_actions=["Yes, it's an emergency", "Moderately urgent", "Normal priority"],
        next_step="priority",
    ),
    "priority": Guidance(
        message="Excellent! Your complaint is ready to be submitted. I'll make sure it reaches the right authorities for quick action.",
        suggested_actions=["Submit complaint", "Review details", "Add more information"],
        next_step="submission",
    ),
    "submission": Guidance(
        message="Your complaint is complete. You can follow its progress in the My Reports section.",
        suggested_actions=["Track status in My Reports", "Report another issue"],
        next_step="submission",
    ),
}


@dataclass
class DialogState:
    """Where a citizen is in the filing dialog and what they told us so far."""

    step: str = "start"
    context: dict = field(default_factory=dict)


def fallback_guidance(step: str) -> Guidance:
    return FALLBACK_GUIDANCE.get(step, FALLBACK_GUIDANCE["start"]).model_copy(deep=True)


def remote_guidance(step: str, user_input: str | None, context: dict, llm) -> Guidance:
    prompt = (
        f'Current step: {step}. User input: "{user_input or "None"}". '
        f"Context: {json.dumps(context or {})}. Provide guidance."
    )
    data = llm.ask_json(GUIDANCE_PROMPT, prompt, max_tokens=400, temperature=0.7)
    try:
        remote = RemoteGuidance.model_validate(drop_nulls(data))
    except ValidationError as e:
        raise ParseFailure(f"Unexpected guidance shape: {e.errors()[:2]}") from e

    # forward-only
    if DIALOG_STEPS.index(remote.nextStep) < DIALOG_STEPS.index(step):
        raise ParseFailure(f"Backward transition {step} -> {remote.nextStep}")

    return Guidance(message=remote.message, suggested_actions=remote.suggestedActions, next_step=remote.nextStep)


def get_next_guidance(state: DialogState, user_input: str | None, llm) -> tuple[Guidance, DialogState]:
    """Run one dialog turn and return the guidance plus the new state."""
    if state.step not in DIALOG_STEPS:
        logger.warning("Unknown dialog step %r, restarting", state.step)
        state = DialogState(context=state.context)

    if state.step == "submission":
        guidance = fallback_guidance("submission")
    else:
        try:
            guidance = remote_guidance(state.step, user_input, state.context, llm)
        except (NetworkFailure, ParseFailure) as e:
            logger.warning("Guidance call failed at step %s, using fallback: %s", state.step, e)
            guidance = fallback_guidance(state.step)

    context = dict(state.context)
    if user_input:
        context[state.step] = user_input
        context["lastGuidance"] = guidance.message

    return guidance, DialogState(step=guidance.next_step, context=context)
