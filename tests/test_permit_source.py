"""Tests for permit source adapters."""

import json
from datetime import date
from pathlib import Path

import pytest

from app.adapters.permit_source.in_memory import InMemoryPermitSource
from app.adapters.permit_source.json_file import JsonFilePermitSource
from app.core.config import DEFAULT_PERMITS_PATH
from app.core.errors import ErrorCode, PermitSourceError, ServerAppError
from app.schemas.permit import PermitStatus

from conftest import FIRST_PERMIT_ID, FIXTURE_PERMIT_COUNT


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "permits.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


class TestJsonFilePermitSource:
    def test_loads_packaged_fixture(self):
        permits = JsonFilePermitSource(DEFAULT_PERMITS_PATH).load()

        assert len(permits) == FIXTURE_PERMIT_COUNT
        first = permits[0]
        assert first.permit_id == FIRST_PERMIT_ID
        assert first.status is PermitStatus.COMPLETE
        assert first.date_submitted == date(2025, 3, 27)
        assert first.property_address.zip == "07732"
        assert first.documents[0].document_type == "Floodplain Development Permit"

    def test_keeps_integer_amounts_as_integers(self):
        permits = JsonFilePermitSource(DEFAULT_PERMITS_PATH).load()

        dumped = permits[0].model_dump(mode="json", by_alias=True)
        assert dumped["improvementAmount"] == 1600
        assert isinstance(dumped["improvementAmount"], int)
        assert dumped["dateSubmitted"] == "2025-03-27"

    def test_missing_file(self, tmp_path: Path):
        source = JsonFilePermitSource(tmp_path / "absent.json")

        with pytest.raises(PermitSourceError) as exc_info:
            source.load()

        assert exc_info.value.code is ErrorCode.SERVER_ERROR
        assert isinstance(exc_info.value, ServerAppError)

    def test_malformed_json(self, tmp_path: Path):
        source = JsonFilePermitSource(_write(tmp_path, "[{not json"))

        with pytest.raises(PermitSourceError, match="not valid JSON"):
            source.load()

    @pytest.mark.parametrize(
        "record_patch",
        [
            {"status": "Archived"},
            {"dateSubmitted": "27/03/2025"},
            {"improvementAmount": -1},
            {"propertyAddress": {"street": "1 Main St"}},
        ],
    )
    def test_schema_violation(self, tmp_path: Path, record_patch: dict):
        record = json.loads(DEFAULT_PERMITS_PATH.read_text(encoding="utf-8"))[0]
        record.update(record_patch)
        source = JsonFilePermitSource(_write(tmp_path, [record]))

        with pytest.raises(PermitSourceError, match="expected schema"):
            source.load()

    def test_missing_documents_is_schema_violation(self, tmp_path: Path):
        record = json.loads(DEFAULT_PERMITS_PATH.read_text(encoding="utf-8"))[0]
        del record["documents"]
        source = JsonFilePermitSource(_write(tmp_path, [record]))

        with pytest.raises(PermitSourceError, match="expected schema"):
            source.load()

    def test_rereads_file_on_every_load(self, tmp_path: Path):
        records = json.loads(DEFAULT_PERMITS_PATH.read_text(encoding="utf-8"))
        path = _write(tmp_path, records[:2])
        source = JsonFilePermitSource(path)

        assert len(source.load()) == 2
        _write(tmp_path, records[:3])
        assert len(source.load()) == 3


def test_in_memory_source_returns_copies(permits):
    source = InMemoryPermitSource(permits)

    loaded = source.load()
    loaded.clear()

    assert len(source.load()) == len(permits)
