# tests/conftest.py
"""
Pytest configuration and shared fixtures.
Adds the project root to sys.path so `import app` / `import main` work without installing.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app.services.application_store import ApplicationStore  # noqa: E402
from app.services.repository import InMemoryApplicationRepository  # noqa: E402


@pytest.fixture
def acme_fields():
    return {
        "company": "Acme",
        "role": "Engineer",
        "dateReceived": "2024-05-01",
        "jobDescription": "Build things",
    }


@pytest.fixture
def march_records():
    return [
        {"id": "1", "company": "Initech", "role": "SRE", "dateReceived": "2024-03-02",
         "jobDescription": "Keep TPS reports flowing", "status": "recruiter"},
        {"id": "2", "company": "Globex", "role": "Backend", "dateReceived": "2024-04-11",
         "jobDescription": "APIs", "status": "ongoing"},
        {"id": "3", "company": "Hooli", "role": "Data", "dateReceived": "2024-03-28",
         "jobDescription": "Pipelines"},
    ]


@pytest.fixture
def memory_repo():
    return InMemoryApplicationRepository()


@pytest.fixture
def store(memory_repo):
    return ApplicationStore(memory_repo, clock=lambda: date(2024, 5, 20))
