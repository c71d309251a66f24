"""Adapter that reads studies with FHIR conditions from a JSON dump."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from dashboardhub.adapters.base import DataAdapter
from dashboardhub.models import ConditionRecord, StudyConditions


class FhirConditionsAdapter(DataAdapter[StudyConditions]):
    """Read a JSON array of studies, each optionally carrying ``conditions``."""

    name = "fhir_conditions"

    def __init__(self, *, json_path: str | Path) -> None:
        self.json_path = Path(json_path)

    def read(self) -> Iterable[StudyConditions]:
        payload = json.loads(self.json_path.read_text())
        if not isinstance(payload, list):
            raise ValueError(f"FHIR studies file {self.json_path} must contain a JSON array")

        for item in payload:
            if not isinstance(item, dict):
                raise ValueError(f"FHIR studies file {self.json_path} contains a non-object entry")
            yield self.parse_study(item)

    @staticmethod
    def parse_study(item: dict[str, Any]) -> StudyConditions:
        study_id = item.get("studyId") or item.get("dbGapId")
        raw_conditions = item.get("conditions")
        if raw_conditions is None:
            return StudyConditions(study_id=study_id, conditions=None)

        return StudyConditions(
            study_id=study_id,
            conditions=tuple(
                ConditionRecord(
                    code=condition.get("code"),
                    display=condition.get("display"),
                    system=condition.get("system"),
                )
                for condition in raw_conditions
            ),
        )
