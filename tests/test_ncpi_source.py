import csv
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from dashboardhub.adapters import FhirConditionsAdapter, NcpiSourceAdapter  # noqa: E402
from dashboardhub.models import ConditionRecord, StudyListingRow  # noqa: E402


def _write_source(path: Path, rows: list[dict[str, str]], fieldnames: list[str]) -> None:
    with path.open("w", newline="") as stream:
        writer = csv.DictWriter(stream, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def test_ncpi_source_adapter_maps_headers_to_rows(tmp_path: Path) -> None:
    csv_path = tmp_path / "dashboard-source-ncpi.csv"
    _write_source(
        csv_path,
        [
            {"platform": "AnVIL", "identifier": "phs000001"},
            {"platform": "BDC", "identifier": " phs000001 "},
            {"platform": "CRDC", "identifier": ""},
            {"platform": "", "identifier": "phs000002"},
        ],
        fieldnames=["platform", "identifier"],
    )

    rows = list(NcpiSourceAdapter(csv_path=csv_path).read())

    assert rows == [
        StudyListingRow(db_gap_id="phs000001", platform="AnVIL"),
        StudyListingRow(db_gap_id="phs000001", platform="BDC"),
        StudyListingRow(db_gap_id="phs000002", platform=""),
    ]


def test_ncpi_source_adapter_keeps_identifiers_as_strings(tmp_path: Path) -> None:
    csv_path = tmp_path / "source.csv"
    _write_source(csv_path, [{"identifier": "000123", "platform": "GMKF"}], ["identifier", "platform"])

    rows = list(NcpiSourceAdapter(csv_path=csv_path).read())

    assert rows[0].db_gap_id == "000123"


def test_ncpi_source_adapter_rejects_missing_headers(tmp_path: Path) -> None:
    csv_path = tmp_path / "source.csv"
    _write_source(csv_path, [{"study": "phs1"}], ["study"])

    with pytest.raises(ValueError, match="identifier"):
        list(NcpiSourceAdapter(csv_path=csv_path).read())


def test_fhir_conditions_adapter_distinguishes_absent_conditions(tmp_path: Path) -> None:
    json_path = tmp_path / "studies.json"
    json_path.write_text(
        json.dumps(
            [
                {"studyId": "phs1", "conditions": [{"code": "123 A", "display": "Flu", "system": "SYS1"}]},
                {"dbGapId": "phs2"},
                {"studyId": "phs3", "conditions": [{"display": "No code"}]},
            ]
        )
    )

    studies = list(FhirConditionsAdapter(json_path=json_path).read())

    assert studies[0].conditions == (ConditionRecord(code="123 A", display="Flu", system="SYS1"),)
    assert studies[1].study_id == "phs2"
    assert studies[1].conditions is None
    assert studies[2].conditions == (ConditionRecord(code=None, display="No code", system=None),)


def test_fhir_conditions_adapter_requires_array(tmp_path: Path) -> None:
    json_path = tmp_path / "studies.json"
    json_path.write_text(json.dumps({"studyId": "phs1"}))

    with pytest.raises(ValueError):
        list(FhirConditionsAdapter(json_path=json_path).read())
