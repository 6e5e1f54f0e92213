import json

import pytest

from app.models.application import ApplicationRecord
from app.services.errors import NotFound, StorageCorrupt, StorageUnavailable
from app.services.repository import (
    InMemoryApplicationRepository,
    JsonFileApplicationRepository,
    _atomic_write,
)


def _rec(app_id, **extra):
    data = {"id": app_id, "company": "Acme", "role": "Engineer",
            "dateReceived": "2024-05-01", "jobDescription": "Build things"}
    data.update(extra)
    return ApplicationRecord.model_validate(data)


class TestJsonFileRepository:

    def test_missing_file_reads_as_empty(self, tmp_path):
        repo = JsonFileApplicationRepository(tmp_path / "applications.json")
        assert repo.load_all() == []
        assert not (tmp_path / "applications.json").exists()

    def test_insert_creates_document_and_parents(self, tmp_path):
        path = tmp_path / "data" / "applications.json"
        repo = JsonFileApplicationRepository(path)
        repo.insert(_rec("1", notes="café ☕"))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document == {"applications": [_rec("1", notes="café ☕").to_document()]}
        assert not list(path.parent.glob("*.tmp"))

    def test_order_is_insertion_order(self, tmp_path):
        repo = JsonFileApplicationRepository(tmp_path / "applications.json")
        for app_id in ["3", "1", "2"]:
            repo.insert(_rec(app_id))
        assert [r.id for r in repo.load_all()] == ["3", "1", "2"]

    def test_replace_rewrites_whole_document(self, tmp_path):
        path = tmp_path / "applications.json"
        repo = JsonFileApplicationRepository(path)
        repo.insert(_rec("1"))
        repo.insert(_rec("2"))

        repo.replace(_rec("2", status="rejected"))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert [a["id"] for a in document["applications"]] == ["1", "2"]
        assert document["applications"][1]["status"] == "rejected"
        assert repo.find("2").status.value == "rejected"

    def test_replace_unknown_id(self, tmp_path):
        repo = JsonFileApplicationRepository(tmp_path / "applications.json")
        repo.insert(_rec("1"))
        with pytest.raises(NotFound):
            repo.replace(_rec("2"))

    def test_find_missing_returns_none(self, tmp_path):
        repo = JsonFileApplicationRepository(tmp_path / "applications.json")
        assert repo.find("1") is None

    @pytest.mark.parametrize("content", [
        "{not json",
        "[]",
        '{"apps": []}',
        '{"applications": [{"company": "no id"}]}',
        '{"applications": [{"id": 1, "company": "numeric id"}]}',
    ])
    def test_malformed_document_is_corrupt(self, tmp_path, content):
        path = tmp_path / "applications.json"
        path.write_text(content, encoding="utf-8")
        repo = JsonFileApplicationRepository(path)
        with pytest.raises(StorageCorrupt):
            repo.load_all()

    def test_corrupt_document_is_left_untouched(self, tmp_path):
        path = tmp_path / "applications.json"
        path.write_text("{not json", encoding="utf-8")
        repo = JsonFileApplicationRepository(path)
        with pytest.raises(StorageCorrupt):
            repo.insert(_rec("1"))
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_legacy_record_loads_next_to_good_ones(self, tmp_path):
        path = tmp_path / "applications.json"
        legacy = {"id": "2", "company": "Initech", "role": "Analyst", "dateReceived": "2024-04-09",
                  "jobDescription": "TPS reports", "status": "Applied"}
        path.write_text(json.dumps({"applications": [_rec("1").to_document(), legacy]}), encoding="utf-8")
        repo = JsonFileApplicationRepository(path)

        records = repo.load_all()
        assert [r.id for r in records] == ["1", "2"]
        assert records[1].status is None
        assert records[1].company == "Initech"
        assert records[1].extra_fields == {"status": "Applied"}
        assert records[1].to_document() == legacy

        repo.insert(_rec("3"))
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["applications"][1] == legacy
        assert [a["id"] for a in document["applications"]] == ["1", "2", "3"]

    def test_failed_write_removes_temp_file(self, tmp_path):
        path = tmp_path / "applications.json"
        with pytest.raises(TypeError):
            _atomic_write(path, {"applications": [{"id": "1", "notes": object()}]})
        assert not path.exists()
        assert not path.with_suffix(".tmp").exists()

    def test_failed_write_keeps_previous_document(self, tmp_path):
        path = tmp_path / "applications.json"
        path.write_text('{"applications": []}', encoding="utf-8")
        with pytest.raises(TypeError):
            _atomic_write(path, {"applications": [{"id": "1", "notes": object()}]})
        assert path.read_text(encoding="utf-8") == '{"applications": []}'
        assert not list(tmp_path.glob("*.tmp"))

    def test_unreadable_path_is_unavailable(self, tmp_path):
        path = tmp_path / "applications.json"
        path.mkdir()
        repo = JsonFileApplicationRepository(path)
        with pytest.raises(StorageUnavailable):
            repo.load_all()


class TestInMemoryRepository:

    def test_seeded_records_are_parsed(self, march_records):
        repo = InMemoryApplicationRepository(march_records)
        assert [r.id for r in repo.load_all()] == ["1", "2", "3"]

    def test_reads_do_not_share_state_with_callers(self, march_records):
        repo = InMemoryApplicationRepository(march_records)
        rec = repo.find("1")
        rec.notes = "mutated outside the repository"
        assert repo.find("1").notes is None

    def test_insert_and_replace(self):
        repo = InMemoryApplicationRepository()
        repo.insert(_rec("1"))
        repo.replace(_rec("1", currentStage="Onsite"))
        assert repo.document == {"applications": [_rec("1", currentStage="Onsite").to_document()]}

    def test_invalid_seed_is_corrupt(self):
        repo = InMemoryApplicationRepository([{"company": "no id"}])
        with pytest.raises(StorageCorrupt):
            repo.load_all()
