import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from civic_reporter import config, models  # noqa: F401
from civic_reporter.database import Base
from civic_reporter.errors import NetworkFailure


class FakeLLM:
    """Stands in for LLMClient: returns canned replies or raises."""

    def __init__(self, reply=None, text="Model answer", error=None):
        self.reply = reply
        self.text = text
        self.error = error
        self.calls = []

    def ask_json(self, system_prompt, user_content, **kwargs):
        self.calls.append(user_content)
        if self.error:
            raise self.error
        return dict(self.reply)

    def ask(self, system_prompt, user_content, **kwargs):
        self.calls.append(user_content)
        self.last_system_prompt = system_prompt
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def offline_llm():
    return FakeLLM(error=NetworkFailure("connection refused"))


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def llm():
    return FakeLLM(error=NetworkFailure("connection refused"))


@pytest.fixture
def client(db, llm, tmp_path, monkeypatch):
    import main

    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(config, "EMERGENCY_WEBHOOK_URL", None)
    main.app.dependency_overrides[main.get_db] = lambda: db
    main.app.dependency_overrides[main.get_llm] = lambda: llm
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()
