# app/services/dependencies.py
from functools import lru_cache

from app.config.settings import get_data_file
from app.services.application_store import ApplicationStore
from app.services.repository import JsonFileApplicationRepository


@lru_cache(maxsize=None)
def _repository_for(path: str) -> JsonFileApplicationRepository:
    # one repository (and file lock) per document path
    return JsonFileApplicationRepository(path)


def get_application_store() -> ApplicationStore:
    """FastAPI dependency. Builds a store over the configured JSON document."""
    return ApplicationStore(_repository_for(str(get_data_file())))
