"""Dashboard output publishers."""

from .base import Publisher
from .condition_report import (
    ConditionCodeReportPublisher,
    build_report_content,
    group_conditions,
    parse_report_content,
)

__all__ = [
    "Publisher",
    "ConditionCodeReportPublisher",
    "build_report_content",
    "group_conditions",
    "parse_report_content",
]
