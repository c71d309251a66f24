"""Input adapters for the dashboard pipelines."""

from .base import DataAdapter
from .fhir_conditions import FhirConditionsAdapter
from .ncpi_source import NcpiSourceAdapter

__all__ = [
    "DataAdapter",
    "FhirConditionsAdapter",
    "NcpiSourceAdapter",
]
