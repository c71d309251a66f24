"""Distinct NCPI studies and their enrichment into dashboard studies."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dashboardhub.config import PLATFORM_DISPLAY
from dashboardhub.enrichment import StudyLookups
from dashboardhub.keys import join_platforms
from dashboardhub.models import (
    CanonicalStudy,
    DistinctStudyEntry,
    EnrichedStudy,
    StudyListingRow,
    StudyProperties,
)

logger = logging.getLogger(__name__)


def get_distinct_study_platforms(rows: Sequence[StudyListingRow], db_gap_id: str) -> tuple[str, ...]:
    """Return the alpha-sorted platforms of every row listing ``db_gap_id``."""

    return tuple(sorted({row.platform for row in rows if row.db_gap_id == db_gap_id}))


def get_distinct_studies(rows: Sequence[StudyListingRow]) -> list[DistinctStudyEntry]:
    """Collapse rows into one entry per dbGaP id, in first-occurrence order.

    Platforms are gathered from the full row set, so ``rows`` must be complete.
    """

    entries: list[DistinctStudyEntry] = []
    listed: set[str] = set()
    for row in rows:
        if row.db_gap_id in listed:
            continue
        listed.add(row.db_gap_id)
        entries.append(
            DistinctStudyEntry(
                db_gap_id=row.db_gap_id,
                platforms=get_distinct_study_platforms(rows, row.db_gap_id),
            )
        )
    return entries


def is_study_fields_complete(study: EnrichedStudy) -> bool:
    return bool(study.study_name) and bool(study.subjects_total)


async def build_dashboard_study(
    entry: DistinctStudyEntry,
    lookups: StudyLookups,
    platform_display: Mapping[str, str] = PLATFORM_DISPLAY,
) -> EnrichedStudy:
    """Resolve the accession and canonical metadata for one distinct study."""

    accession = await lookups.resolve_accession(entry.db_gap_id)
    study = await lookups.fetch_canonical_study(accession) or CanonicalStudy()
    url = lookups.study_url(accession)

    return EnrichedStudy(
        db_gap_id_accession=accession,
        study_name=study.study_name,
        subjects_total=study.subjects_total,
        platform=join_platforms(entry.platforms, platform_display),
        platforms=list(entry.platforms),
        study_url=url,
        gap_id=lookups.build_gap_id(entry.db_gap_id, url),
        study_designs=list(study.study_designs),
        consent_codes=list(study.consent_codes),
        data_types=list(study.data_types),
        diseases=list(study.diseases),
    )


async def build_dashboard_studies(
    entries: Sequence[DistinctStudyEntry],
    lookups: StudyLookups,
    platform_display: Mapping[str, str] = PLATFORM_DISPLAY,
) -> list[EnrichedStudy]:
    """Enrich entries one at a time, keeping only studies with a name and subjects.

    A lookup failure propagates and aborts the whole run.
    """

    studies: list[EnrichedStudy] = []
    for entry in entries:
        try:
            study = await build_dashboard_study(entry, lookups, platform_display)
        except Exception:
            logger.error("Study lookup failed for %s", entry.db_gap_id)
            raise

        if is_study_fields_complete(study):
            studies.append(study)
        else:
            logger.info("Dropping incomplete study %s", entry.db_gap_id)

    return studies


def get_set_of_study_ids(workspaces: Iterable[Any]) -> dict[str, None]:
    """Return distinct ``phs`` dbGaP ids of workspaces, in first-occurrence order."""

    study_ids: dict[str, None] = {}
    for workspace in workspaces:
        if isinstance(workspace, Mapping):
            db_gap_id = workspace.get("dbGapId")
        else:
            db_gap_id = getattr(workspace, "db_gap_id", None)
        if db_gap_id and str(db_gap_id).startswith("phs"):
            study_ids[str(db_gap_id)] = None
    return study_ids


async def get_study_properties_by_id(
    workspaces: Iterable[Any],
    lookups: StudyLookups,
) -> dict[str, StudyProperties]:
    """Map each workspace dbGaP id to its accession, designs, name and url."""

    properties: dict[str, StudyProperties] = {}
    for study_id in get_set_of_study_ids(workspaces):
        accession = await lookups.resolve_accession(study_id)
        url = lookups.study_url(accession)
        study = await lookups.fetch_canonical_study(accession)

        properties[study_id] = StudyProperties(
            db_gap_id_accession=accession,
            study_designs=study.study_designs if study else (),
            study_name=study.study_name if study else None,
            study_url=url,
        )
    return properties
