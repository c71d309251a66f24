"""In-memory data models shared by the dashboard pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ConditionRecord:
    """One coded clinical condition attached to a study."""

    code: str | None = None
    display: str | None = None
    system: str | None = None


@dataclass(frozen=True)
class StudyConditions:
    """A study and its FHIR conditions.

    ``conditions`` is ``None`` when the source study carried no conditions
    field at all, as opposed to an empty tuple.
    """

    study_id: str | None
    conditions: tuple[ConditionRecord, ...] | None = None


@dataclass(frozen=True)
class StudyListingRow:
    """One row of the NCPI platform source file."""

    db_gap_id: str
    platform: str


@dataclass(frozen=True)
class DistinctStudyEntry:
    """A distinct dbGaP study with every platform that lists it."""

    db_gap_id: str
    platforms: tuple[str, ...] = ()


@dataclass(frozen=True)
class CanonicalStudy:
    """Study metadata derived from the FHIR research study cache."""

    study_name: str | None = None
    subjects_total: int | None = None
    study_designs: tuple[str, ...] = ()
    consent_codes: tuple[str, ...] = ()
    data_types: tuple[str, ...] = ()
    diseases: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CanonicalStudy:
        """Build from the camelCase JSON shape used by the FHIR cache."""

        return cls(
            study_name=payload.get("studyName"),
            subjects_total=payload.get("subjectsTotal"),
            study_designs=tuple(payload.get("studyDesigns") or ()),
            consent_codes=tuple(payload.get("consentCodes") or ()),
            data_types=tuple(payload.get("dataTypes") or ()),
            diseases=tuple(payload.get("diseases") or ()),
        )


@dataclass
class EnrichedStudy:
    """Display-ready NCPI dashboard study."""

    db_gap_id_accession: str | None
    study_name: str | None
    subjects_total: int | None
    platform: str
    platforms: list[str] = field(default_factory=list)
    study_url: str | None = None
    gap_id: str | None = None
    study_designs: list[str] = field(default_factory=list)
    consent_codes: list[str] = field(default_factory=list)
    data_types: list[str] = field(default_factory=list)
    diseases: list[str] = field(default_factory=list)

    def to_row(self) -> dict[str, Any]:
        """Serialize into the dashboard's camelCase display shape."""

        return {
            "consentCodes": self.consent_codes,
            "dataTypes": self.data_types,
            "dbGapIdAccession": self.db_gap_id_accession,
            "diseases": self.diseases,
            "gapId": self.gap_id,
            "platform": self.platform,
            "platforms": self.platforms,
            "studyDesigns": self.study_designs,
            "studyName": self.study_name,
            "studyUrl": self.study_url,
            "subjectsTotal": self.subjects_total,
        }


@dataclass(frozen=True)
class StudyProperties:
    """Accession, designs, name and url of a study referenced by a workspace."""

    db_gap_id_accession: str | None
    study_designs: tuple[str, ...] = ()
    study_name: str | None = None
    study_url: str | None = None
