# app/models/application.py

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
REQUIRED_FIELDS = ("company", "role", "dateReceived", "jobDescription")


class ApplicationStatus(str, Enum):
    RECRUITER = "recruiter"
    ONGOING = "ongoing"
    REJECTED = "rejected"
    SUCCESS = "success"


class InterviewQuestion(BaseModel):
    """One question asked during an interview round, with the answer given."""

    model_config = ConfigDict(extra="allow")

    question: str
    my_answer: Optional[str] = Field(default=None, alias="myAnswer")
    round: Optional[str] = None
    date: Optional[str] = None


class ApplicationRecord(BaseModel):
    """
    A tracked job application.

    Named fields cover everything the tracker UI knows about. Any other
    top-level key is kept in `extra_fields` and written back unchanged, so
    callers can attach their own data without it being dropped.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    # required on create (see REQUIRED_FIELDS); defaults only so stored
    # records with a broken value can still be loaded
    date_received: str = Field(default="", alias="dateReceived")
    company: str = ""
    role: str = ""
    job_description: str = Field(default="", alias="jobDescription")

    culture: Optional[str] = None
    mission: Optional[str] = None
    values: Optional[List[str]] = None
    interview_process: Optional[str] = Field(default=None, alias="interviewProcess")
    current_stage: Optional[str] = Field(default=None, alias="currentStage")
    status: Optional[ApplicationStatus] = None
    metadata: Optional[Dict[str, Any]] = None
    prep_questions: Optional[Dict[str, str]] = Field(default=None, alias="prepQuestions")
    interview_questions: Optional[List[InterviewQuestion]] = Field(default=None, alias="interviewQuestions")
    notes: Optional[str] = None

    extra_fields: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _split_unknown_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = known_keys()
        recognised = {k: v for k, v in data.items() if k in known}
        recognised["extra_fields"] = {k: v for k, v in data.items() if k not in known}
        return recognised

    @field_validator("company", "role", "job_description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("date_received")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        if not DATE_PATTERN.match(v):
            raise ValueError("must be an ISO date (YYYY-MM-DD)")
        try:
            datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError(f"{v} is not a valid calendar date")
        return v

    @classmethod
    def from_stored(cls, raw: Dict[str, Any]) -> "ApplicationRecord":
        """
        Load a persisted record without rejecting it. Keys whose value no
        longer validates (a legacy status, a hand-edited date) are kept
        verbatim in `extra_fields`, so they are written back untouched.
        """
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
            record = cls.model_validate({k: v for k, v in raw.items() if k not in bad})
            record.extra_fields.update({k: raw[k] for k in raw if k in bad})
            return record

    @property
    def month(self) -> str:
        return self.date_received[:7]

    def to_document(self) -> Dict[str, Any]:
        """Serialise back to the persisted camelCase shape, keeping only supplied keys."""
        doc = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude={"extra_fields"},
        )
        doc.update(self.extra_fields)
        return doc


def known_keys() -> set:
    keys = set()
    for name, field in ApplicationRecord.model_fields.items():
        if name == "extra_fields":
            continue
        keys.add(field.alias or name)
    return keys


def describe_validation_error(errors) -> str:
    """Flatten a pydantic error (or its `.errors()` list) into `field: reason; field: reason`."""
    if isinstance(errors, ValidationError):
        errors = errors.errors()
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "extra_fields")
        msg = err.get("msg", "invalid value")
        msg = msg.replace("Value error, ", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)
