import pytest

from civic_reporter import faq, store
from civic_reporter.chatbot import CHAT_PROMPT, answer_chat
from civic_reporter.errors import ValidationFailure
from tests.conftest import FakeLLM


def test_feature_question_answered_without_model():
    llm = FakeLLM()
    reply = answer_chat("Where is the status tracker?", llm)

    assert "My Reports" in reply.response
    assert llm.calls == []
    assert reply.conversation_id.startswith("conv_")


def test_conversation_id_is_kept():
    reply = answer_chat("how do I upload image?", FakeLLM(), conversation_id="conv_42")
    assert reply.conversation_id == "conv_42"


def test_empty_message_rejected():
    with pytest.raises(ValidationFailure):
        answer_chat("   ", FakeLLM())


def test_status_uses_own_complaints(db):
    store.create_issue(db, "u1", "Broken pipe", "Water everywhere", "municipal", subcategory="water")
    resolved = store.create_issue(db, "u1", "Dark lane", "Streetlight off", "municipal", subcategory="streetlights")
    store.update_issue_status(db, resolved.id, "resolved")
    store.create_issue(db, "u2", "Not mine", "Someone else", "municipal")

    reply = answer_chat("What is the status of my complaints?", FakeLLM(), db=db, user_id="u1")

    assert "2 total complaints" in reply.response
    assert "1 Pending" in reply.response
    assert "1 Resolved" in reply.response


def test_no_complaints_yet(db):
    reply = answer_chat("track my complaint", FakeLLM(), db=db, user_id="new-user")
    assert "haven't submitted any complaints" in reply.response


def test_pending_list(db):
    store.create_issue(db, "u1", "Garbage pile", "Not collected", "municipal", subcategory="trash")
    reply = answer_chat("how many are pending?", FakeLLM(), db=db, user_id="u1")

    assert "Your Pending Complaints (1)" in reply.response
    assert "Garbage pile" in reply.response
    assert "0 days ago" in reply.response


def test_category_question(db):
    store.create_issue(db, "u1", "Leak", "Pipe leaking", "municipal", subcategory="water")
    reply = answer_chat("any news on water?", FakeLLM(), db=db, user_id="u1")
    assert "1 water supply issue(s)" in reply.response


def test_model_answers_other_questions(db):
    store.create_issue(db, "u1", "Leak", "Pipe leaking", "municipal", subcategory="water")
    llm = FakeLLM(text="The GHMC handles that.")
    reply = answer_chat("Who fixes trees that fell down?", llm, db=db, user_id="u1")

    assert reply.response == "The GHMC handles that."
    assert llm.last_system_prompt.startswith(CHAT_PROMPT)
    assert "Total complaints: 1" in llm.last_system_prompt


def test_model_failure_uses_general_faq(offline_llm):
    reply = answer_chat("What is the office phone number?", offline_llm)
    assert reply.response.startswith("**Authority Contacts**")


def test_help_and_welcome(offline_llm):
    assert answer_chat("I need help", offline_llm).response == faq.HELP_RESPONSE
    assert answer_chat("hello there", offline_llm).response == faq.WELCOME_RESPONSE
