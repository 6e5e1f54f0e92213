# app/services/application_store.py
import logging
import re
from collections import Counter
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from app.models.application import REQUIRED_FIELDS, ApplicationRecord, ApplicationStatus, describe_validation_error
from app.services.errors import NotFound, ValidationFailed
from app.services.id_utils import generate_application_id
from app.services.repository import ApplicationRepository

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
ALL_MONTHS = "all"


def current_month(today: date) -> str:
    return today.strftime("%Y-%m")


def _validate(data: Dict[str, Any]) -> ApplicationRecord:
    try:
        return ApplicationRecord.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(describe_validation_error(e), context={"id": data.get("id")})


class ApplicationStore:
    """
    Record-store contract over an ApplicationRepository.

    Operations are independent: each reads what it needs from the
    repository and writes the full document back on mutation.
    """

    def __init__(self, repository: ApplicationRepository, clock: Callable[[], date] = date.today):
        self.repository = repository
        self.clock = clock

    # ============================================================
    # 📘 Reads
    # ============================================================

    def list_applications(
        self, month: Optional[str] = None, status: Optional[str] = None
    ) -> Tuple[str, List[ApplicationRecord]]:
        """
        Records received in `month` (YYYY-MM), in insertion order.
        No month means the current calendar month; "all" skips the filter.
        Returns the month label actually applied alongside the records.
        """
        month = (month or "").strip() or current_month(self.clock())
        if month != ALL_MONTHS and not MONTH_PATTERN.match(month):
            raise ValidationFailed(f"month must be YYYY-MM or '{ALL_MONTHS}', got {month!r}")

        records = self.repository.load_all()
        if month != ALL_MONTHS:
            records = [r for r in records if r.date_received[:7] == month]

        if status:
            wanted = status.strip().lower()
            records = [r for r in records if r.status is not None and r.status.value == wanted]

        logger.info(f"📂 Listed {len(records)} application(s) for {month}")
        return month, records

    def get_application(self, app_id: str) -> ApplicationRecord:
        record = self.repository.find(app_id)
        if record is None:
            logger.warning(f"⚠️ No application found with ID: {app_id}")
            raise NotFound(f"No application found with ID: {app_id}", context={"id": app_id})
        return record

    def summarize(self) -> Dict[str, Any]:
        """Total plus counts per month ("unknown" when undated) and per status ("none" when unset)."""
        records = self.repository.load_all()
        months = Counter(r.month or "unknown" for r in records)
        statuses = Counter(r.status.value if r.status else "none" for r in records)
        return {
            "total": len(records),
            "months": dict(sorted(months.items())),
            "statuses": {s: statuses[s] for s in [*(x.value for x in ApplicationStatus), "none"] if statuses[s]},
        }

    # ============================================================
    # 🧩 Create / Update
    # ============================================================

    def create_application(self, fields: Dict[str, Any]) -> ApplicationRecord:
        """Validate, assign the next id, append and persist."""
        missing = [
            k for k in REQUIRED_FIELDS
            if not isinstance(fields.get(k), str) or not fields[k].strip()
        ]
        if missing:
            logger.warning(f"⚠️ Create rejected, missing: {', '.join(missing)}")
            raise ValidationFailed(f"Missing required field(s): {', '.join(missing)}", context={"missing": missing})

        existing_ids = [r.id for r in self.repository.load_all()]
        new_id = generate_application_id(existing_ids)

        data = {k: v for k, v in fields.items() if k != "id"}
        record = _validate({"id": new_id, **data})

        self.repository.insert(record)
        logger.info(f"🆕 Added application {new_id} ({record.company} / {record.role})")
        return record

    def update_application(self, app_id: str, partial: Dict[str, Any]) -> ApplicationRecord:
        """
        Shallow-merge `partial` onto the stored record. Lists and maps are
        replaced whole. The stored id always wins over one in the payload.
        A blank `status` clears it. Only the keys in `partial` are held to
        create-time validation; stale stored values are carried over as-is.
        """
        existing = self.get_application(app_id)

        merged = {**existing.to_document(), **partial}
        merged["id"] = existing.id
        if isinstance(partial.get("status"), str) and not partial["status"].strip():
            del merged["status"]

        try:
            record = ApplicationRecord.model_validate(merged)
        except ValidationError as e:
            own = [err for err in e.errors() if err.get("loc") and err["loc"][0] in partial]
            if own:
                raise ValidationFailed(describe_validation_error(own), context={"id": app_id})
            record = ApplicationRecord.from_stored(merged)

        self.repository.replace(record)
        changed = sorted(k for k in partial if k != "id")
        logger.info(f"🔁 Updated application {app_id}: {', '.join(changed) or 'no fields'}")
        return record
