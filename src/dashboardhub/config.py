"""Configuration contracts for the dashboard pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping


PLATFORM_DISPLAY: Mapping[str, str] = {
    "ANVIL": "AnVIL",
    "BDC": "BDC",
    "CRDC": "CRDC",
    "GMKF": "GMKF",
    "KFDRC": "KFDRC",
}

DEFAULT_SORT_KEYS: tuple[str, ...] = ("platform", "study_name")

DBGAP_STUDY_URL = "https://www.ncbi.nlm.nih.gov/projects/gap/cgi-bin/study.cgi?study_id="


@dataclass(frozen=True)
class DashboardConfig:
    """Paths and lookup settings for a dashboard run.

    Paths are explicit so each run can target its own report and cache files.
    """

    report_path: Path = Path("cache-reports/dashboard-report.tsv")
    source_path: Path = Path("dashboard-source-ncpi.csv")
    accession_cache_path: Path = Path("cache/dashboard-accessions.json")
    fhir_study_cache_path: Path = Path("cache/dashboard-fhir-studies.json")
    dbgap_study_url: str = DBGAP_STUDY_URL
    request_timeout: float = 30.0
    platform_display: Mapping[str, str] = field(default_factory=lambda: dict(PLATFORM_DISPLAY))
    sort_keys: tuple[str, ...] = DEFAULT_SORT_KEYS
    ignore_case_sort: bool = False


class DashboardConfigLoader:
    """Load ``DashboardConfig`` from ``config/dashboard.json`` or a custom path."""

    _PATH_FIELDS = ("report_path", "source_path", "accession_cache_path", "fhir_study_cache_path")

    def __init__(self, config_dir: str | Path | None = None) -> None:
        if config_dir is None:
            config_dir = Path(__file__).resolve().parents[2] / "config"
        self.config_dir = Path(config_dir)

    def load(self, name_or_path: str | Path = "dashboard") -> DashboardConfig:
        """Load a config by name (for example, ``dashboard``) or explicit path."""

        path = self._resolve_path(name_or_path)
        payload = json.loads(path.read_text())
        if not isinstance(payload, dict):
            raise ValueError(f"Dashboard config {path} must be a JSON object")
        return self._parse(payload, base_dir=path.parent)

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.config_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        available = sorted(path.stem for path in self.config_dir.glob("*.json"))
        raise FileNotFoundError(
            f"Dashboard config not found: {name_or_path}. Available: {', '.join(available)}"
        )

    def _parse(self, payload: dict[str, Any], *, base_dir: Path) -> DashboardConfig:
        known = {item.name for item in fields(DashboardConfig)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown dashboard config keys: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name in self._PATH_FIELDS:
            if name in payload:
                path = Path(str(payload[name])).expanduser()
                values[name] = path if path.is_absolute() else base_dir / path

        if "dbgap_study_url" in payload:
            values["dbgap_study_url"] = str(payload["dbgap_study_url"])

        if "request_timeout" in payload:
            timeout = float(payload["request_timeout"])
            if timeout <= 0:
                raise ValueError("request_timeout must be > 0")
            values["request_timeout"] = timeout

        if "platform_display" in payload:
            display = payload["platform_display"]
            if not isinstance(display, dict):
                raise ValueError("platform_display must be an object")
            values["platform_display"] = {
                str(key).strip().upper(): str(value) for key, value in display.items()
            }

        if "sort_keys" in payload:
            sort_keys = tuple(str(key).strip() for key in payload["sort_keys"] if str(key).strip())
            if not sort_keys:
                raise ValueError("sort_keys must name at least one field")
            values["sort_keys"] = sort_keys

        if "ignore_case_sort" in payload:
            values["ignore_case_sort"] = bool(payload["ignore_case_sort"])

        return DashboardConfig(**values)
