"""Dashboard pipeline orchestrators."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from dashboardhub.adapters import DataAdapter, FhirConditionsAdapter, NcpiSourceAdapter
from dashboardhub.config import DEFAULT_SORT_KEYS, PLATFORM_DISPLAY, DashboardConfig
from dashboardhub.enrichment import CachedStudyLookups, StudyLookups
from dashboardhub.keys import sort_by_keys
from dashboardhub.models import EnrichedStudy, StudyConditions, StudyListingRow
from dashboardhub.publishers import ConditionCodeReportPublisher
from dashboardhub.studies import build_dashboard_studies, get_distinct_studies

logger = logging.getLogger(__name__)


@dataclass
class StudyUnifierReport:
    """Execution summary for a study unifier run."""

    source_rows: int = 0
    distinct_studies: int = 0
    dropped_studies: int = 0
    studies: list[EnrichedStudy] = field(default_factory=list)


class StudyUnifierPipeline:
    """Deduplicate source rows, enrich each distinct study, filter and sort."""

    def __init__(
        self,
        *,
        adapter: DataAdapter[StudyListingRow],
        lookups: StudyLookups,
        platform_display: Mapping[str, str] | None = None,
        sort_keys: Sequence[str] = DEFAULT_SORT_KEYS,
        ignore_case_sort: bool = False,
    ) -> None:
        self.adapter = adapter
        self.lookups = lookups
        self.platform_display = platform_display if platform_display is not None else PLATFORM_DISPLAY
        self.sort_keys = tuple(sort_keys)
        self.ignore_case_sort = ignore_case_sort
        self.last_report: StudyUnifierReport | None = None

    @classmethod
    def from_config(
        cls,
        config: DashboardConfig,
        *,
        lookups: StudyLookups | None = None,
    ) -> StudyUnifierPipeline:
        return cls(
            adapter=NcpiSourceAdapter(csv_path=config.source_path),
            lookups=lookups or CachedStudyLookups.from_config(config),
            platform_display=config.platform_display,
            sort_keys=config.sort_keys,
            ignore_case_sort=config.ignore_case_sort,
        )

    def run(self) -> list[EnrichedStudy]:
        return asyncio.run(self.run_async())

    async def run_async(self) -> list[EnrichedStudy]:
        rows = list(self.adapter.read())
        entries = get_distinct_studies(rows)
        logger.info("Found %s distinct studies in %s source rows", len(entries), len(rows))

        studies = await build_dashboard_studies(entries, self.lookups, self.platform_display)
        studies = sort_by_keys(studies, *self.sort_keys, ignore_case=self.ignore_case_sort)

        self.last_report = StudyUnifierReport(
            source_rows=len(rows),
            distinct_studies=len(entries),
            dropped_studies=len(entries) - len(studies),
            studies=studies,
        )
        return studies


class ConditionReportPipeline:
    """Read studies with conditions and publish the condition code report."""

    def __init__(
        self,
        *,
        adapter: DataAdapter[StudyConditions],
        publisher: ConditionCodeReportPublisher,
    ) -> None:
        self.adapter = adapter
        self.publisher = publisher

    @classmethod
    def from_config(cls, config: DashboardConfig, *, studies_path: str | Path) -> ConditionReportPipeline:
        return cls(
            adapter=FhirConditionsAdapter(json_path=studies_path),
            publisher=ConditionCodeReportPublisher(output_path=config.report_path),
        )

    def run(self) -> int:
        """Publish the report and return the number of studies read."""

        studies = list(self.adapter.read())
        self.publisher.publish(studies)
        return len(studies)
