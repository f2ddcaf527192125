import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["DEPLOYMENT_ENV"] = "test"

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from wellness_admin.platform.database import Base, get_db
from wellness_admin.main import app
from wellness_admin.models.assessment_definition import AssessmentDefinition  # noqa: F401
from wellness_admin.models.activity_log import ActivityLog  # noqa: F401

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite (cascade deletes)
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: build questionnaire payloads quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}_{uuid.uuid4().hex[:8]}"


def build_question(order, text=None, values=(0, 1, 2, 3), reverse_scored=False, domain=None, question_id=None):
    question = {
        "text": text or f"Question number {order}?",
        "order": order,
        "responseType": "likert",
        "reverseScored": reverse_scored,
        "options": [
            {"value": value, "text": f"Option {value}", "order": index + 1}
            for index, value in enumerate(values)
        ],
    }
    if domain is not None:
        question["domain"] = domain
    if question_id is not None:
        question["id"] = question_id
    return question


def build_definition_payload(**overrides):
    """Two likert questions valued 0-3, maxScore 6, Low/High bands."""
    payload = {
        "name": overrides.pop("name", "Sample Mood Check"),
        "type": overrides.pop("type", f"mood_check_{_unique_id()}"),
        "category": overrides.pop("category", "depression"),
        "description": overrides.pop("description", "A short two-question mood screener."),
        "timeEstimate": overrides.pop("timeEstimate", "2 minutes"),
        "scoringConfig": overrides.pop(
            "scoringConfig",
            {
                "minScore": 0,
                "maxScore": 6,
                "interpretationBands": [
                    {"max": 2, "label": "Low", "color": "#22c55e"},
                    {"max": 6, "label": "High", "color": "#ef4444"},
                ],
            },
        ),
        "questions": overrides.pop("questions", [build_question(1), build_question(2)]),
    }
    payload.update(overrides)
    return payload


def create_definition_via_api(client, headers=None, **overrides):
    """Create an assessment definition via the API. Returns the response."""
    return client.post(
        "/api/v1/admin/assessments",
        json=build_definition_payload(**overrides),
        headers=headers or {"X-Admin-Email": "admin@test.com"},
    )


def get_definition_via_api(client, assessment_id):
    resp = client.get(f"/api/v1/admin/assessments/{assessment_id}")
    assert resp.status_code == 200, f"Fetch failed: {resp.text}"
    return resp.json()["data"]


def question_ids_by_order(definition):
    return {q["order"]: q["id"] for q in definition["questions"]}
