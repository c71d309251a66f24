"""Dashboard study and condition aggregation pipelines.

This package builds the condition code report and the unified NCPI study
listing from FHIR condition dumps, the NCPI platform source and dbGaP lookups.
"""

from .config import (
    DEFAULT_SORT_KEYS,
    PLATFORM_DISPLAY,
    DashboardConfig,
    DashboardConfigLoader,
)
from .enrichment import (
    CachedStudyLookups,
    DbGapAccessionResolver,
    FhirStudyCatalog,
    StudyLookups,
    build_gap_id,
    study_url,
)
from .models import (
    CanonicalStudy,
    ConditionRecord,
    DistinctStudyEntry,
    EnrichedStudy,
    StudyConditions,
    StudyListingRow,
    StudyProperties,
)
from .pipeline import ConditionReportPipeline, StudyUnifierPipeline, StudyUnifierReport
from .studies import (
    build_dashboard_studies,
    get_distinct_studies,
    get_study_properties_by_id,
)

__all__ = [
    "DEFAULT_SORT_KEYS",
    "PLATFORM_DISPLAY",
    "CachedStudyLookups",
    "CanonicalStudy",
    "ConditionRecord",
    "ConditionReportPipeline",
    "DashboardConfig",
    "DashboardConfigLoader",
    "DbGapAccessionResolver",
    "DistinctStudyEntry",
    "EnrichedStudy",
    "FhirStudyCatalog",
    "StudyConditions",
    "StudyListingRow",
    "StudyLookups",
    "StudyProperties",
    "StudyUnifierPipeline",
    "StudyUnifierReport",
    "build_dashboard_studies",
    "build_gap_id",
    "get_distinct_studies",
    "get_study_properties_by_id",
    "study_url",
]
