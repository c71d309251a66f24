"""TSV report of FHIR condition codes and their display values."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from dashboardhub.keys import root_code
from dashboardhub.models import ConditionRecord, StudyConditions
from dashboardhub.publishers.base import Publisher

logger = logging.getLogger(__name__)

ROW_SEPARATOR = "\r\n"
COLUMN_SEPARATOR = "\t"
DISPLAY_SEPARATOR = "; "

# Dicts with ``None`` values stand in for insertion-ordered sets.
DisplaySet = dict[str | None, None]
ConditionsBySystem = dict[str | None, DisplaySet]
ConditionsBySystemByCode = dict[str | None, ConditionsBySystem]


def iter_conditions(studies: Iterable[StudyConditions]) -> Iterator[ConditionRecord]:
    """Yield every condition across studies; studies without conditions yield nothing."""

    for study in studies:
        if study.conditions is None:
            continue
        yield from study.conditions


def group_conditions(
    studies: Iterable[StudyConditions],
    *,
    by_system: bool = True,
) -> ConditionsBySystemByCode | dict[str | None, DisplaySet]:
    """Group condition displays by root code and, optionally, coding system.

    Absent or empty codes, systems and displays are all keyed as ``None``.
    """

    grouped: dict = {}
    for condition in iter_conditions(studies):
        key = root_code(condition.code)
        if by_system:
            bucket = grouped.setdefault(key, {}).setdefault(condition.system or None, {})
        else:
            bucket = grouped.setdefault(key, {})
        bucket[condition.display or None] = None
    return grouped


def _format_row(*columns: str | None) -> str:
    return COLUMN_SEPARATOR.join(column or "" for column in columns) + ROW_SEPARATOR


def _join_displays(displays: Iterable[str | None]) -> str:
    return DISPLAY_SEPARATOR.join(display or "" for display in displays)


def build_report_content(grouped: dict, *, by_system: bool = True) -> str:
    """Serialize grouped conditions into TSV rows in insertion order."""

    rows: list[str] = []
    for code, bucket in grouped.items():
        if not by_system:
            rows.append(_format_row(code, _join_displays(bucket)))
            continue
        for system, displays in bucket.items():
            rows.append(_format_row(code, system, _join_displays(displays)))
    return "".join(rows)


def parse_report_content(content: str) -> dict[str | None, dict[str | None, list[str | None]]]:
    """Parse a code/system/displays report back into its grouped mapping."""

    parsed: dict[str | None, dict[str | None, list[str | None]]] = {}
    for line in content.split(ROW_SEPARATOR):
        if not line:
            continue
        columns = line.split(COLUMN_SEPARATOR)
        if len(columns) != 3:
            raise ValueError(f"Report row must have 3 columns, found {len(columns)}: {line!r}")
        code, system, displays = columns
        parsed.setdefault(code or None, {})[system or None] = [
            display or None for display in displays.split(DISPLAY_SEPARATOR)
        ]
    return parsed


class ConditionCodeReportPublisher(Publisher[StudyConditions]):
    """Write every condition code with its coding system and display values.

    Each run replaces the report. Empty input leaves any existing report
    untouched.
    """

    def __init__(self, *, output_path: str | Path, by_system: bool = True) -> None:
        self.output_path = Path(output_path)
        self.by_system = by_system

    def publish(self, records: Sequence[StudyConditions]) -> None:
        if not records:
            logger.debug("No studies supplied; skipping condition report")
            return

        grouped = group_conditions(records, by_system=self.by_system)
        if None in grouped:
            logger.warning("Condition report contains records without a code")

        content = build_report_content(grouped, by_system=self.by_system)

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("w", newline="", encoding="utf-8") as stream:
            stream.write(content)

        logger.info("Wrote %s condition codes to %s", len(grouped), self.output_path)
