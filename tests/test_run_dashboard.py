import csv
import json
import subprocess
import sys
from pathlib import Path


def _write_config(tmp_path: Path) -> Path:
    source_path = tmp_path / "dashboard-source-ncpi.csv"
    with source_path.open("w", newline="") as stream:
        writer = csv.DictWriter(stream, fieldnames=["platform", "identifier"])
        writer.writeheader()
        writer.writerow({"platform": "BDC", "identifier": "phs000001"})
        writer.writerow({"platform": "ANVIL", "identifier": "phs000001"})
        writer.writerow({"platform": "GMKF", "identifier": "phs000002"})

    (tmp_path / "accessions.json").write_text(
        json.dumps({"phs000001": "phs000001.v3.p1", "phs000002": "phs000002.v1.p1"})
    )
    (tmp_path / "fhir.json").write_text(
        json.dumps(
            {
                "phs000001": {"studyName": "Heart Study", "subjectsTotal": 10},
                "phs000002": {"studyName": "No Subjects", "subjectsTotal": 0},
            }
        )
    )

    config_path = tmp_path / "dashboard.json"
    config_path.write_text(
        json.dumps(
            {
                "report_path": "reports/dashboard-report.tsv",
                "source_path": "dashboard-source-ncpi.csv",
                "accession_cache_path": "accessions.json",
                "fhir_study_cache_path": "fhir.json",
            }
        )
    )
    return config_path


def test_run_dashboard_builds_ncpi_studies(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    config_path = _write_config(tmp_path)
    output_path = tmp_path / "studies.json"

    result = subprocess.run(
        [
            sys.executable,
            "scripts/run_dashboard.py",
            "--config",
            str(config_path),
            "ncpi-studies",
            "--output",
            str(output_path),
        ],
        cwd=repo_root,
        text=True,
        capture_output=True,
        check=True,
    )

    payload = json.loads(result.stdout)
    assert payload["distinct_studies"] == 2
    assert payload["dropped_studies"] == 1

    rows = json.loads(output_path.read_text())
    assert rows[0]["studyName"] == "Heart Study"
    assert rows[0]["platform"] == "AnVIL, BDC"
    assert rows[0]["dbGapIdAccession"] == "phs000001.v3.p1"


def test_run_dashboard_writes_condition_report(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    config_path = _write_config(tmp_path)
    studies_path = tmp_path / "studies.json"
    studies_path.write_text(
        json.dumps(
            [
                {
                    "studyId": "phs000001",
                    "conditions": [
                        {"code": "123 A", "display": "Flu", "system": "SYS1"},
                        {"code": "123 B", "display": "Cold", "system": "SYS1"},
                    ],
                },
                {"studyId": "phs000002"},
            ]
        )
    )

    result = subprocess.run(
        [
            sys.executable,
            "scripts/run_dashboard.py",
            "--config",
            str(config_path),
            "report-conditions",
            "--studies",
            str(studies_path),
        ],
        cwd=repo_root,
        text=True,
        capture_output=True,
        check=True,
    )

    payload = json.loads(result.stdout)
    assert payload["studies"] == 2

    report_path = tmp_path / "reports" / "dashboard-report.tsv"
    assert report_path.read_bytes() == b"123\tSYS1\tFlu; Cold\r\n"
