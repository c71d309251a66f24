#!/usr/bin/env python3
"""Run the dashboard condition report or NCPI study unifier."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from dashboardhub import (  # noqa: E402
    ConditionReportPipeline,
    DashboardConfigLoader,
    StudyUnifierPipeline,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build dashboard reports and study listings")
    parser.add_argument("--config", default="dashboard", help="Config name or path to dashboard JSON config")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report-conditions", help="Write the FHIR condition code TSV report")
    report.add_argument("--studies", required=True, help="JSON array of studies with conditions")

    studies = subparsers.add_parser("ncpi-studies", help="Build the unified NCPI study listing")
    studies.add_argument("--output", help="Write the study listing JSON here instead of stdout")

    return parser.parse_args()


def run_report(args: argparse.Namespace, logger: logging.Logger) -> dict:
    config = DashboardConfigLoader().load(args.config)
    pipeline = ConditionReportPipeline.from_config(config, studies_path=args.studies)
    study_count = pipeline.run()
    logger.info("Condition report complete: %s", config.report_path)
    return {"command": args.command, "studies": study_count, "report_path": str(config.report_path)}


def run_studies(args: argparse.Namespace, logger: logging.Logger) -> dict:
    config = DashboardConfigLoader().load(args.config)
    pipeline = StudyUnifierPipeline.from_config(config)
    studies = pipeline.run()
    report = pipeline.last_report

    rows = [study.to_row() for study in studies]
    payload = {
        "command": args.command,
        "source_rows": report.source_rows if report else 0,
        "distinct_studies": report.distinct_studies if report else 0,
        "dropped_studies": report.dropped_studies if report else 0,
        "studies": len(rows),
    }

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(rows, indent=2))
        logger.info("Wrote %s studies to %s", len(rows), output_path)
        payload["output"] = str(output_path)
    else:
        payload["rows"] = rows

    return payload


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger("dashboardhub.runner")

    if args.command == "report-conditions":
        payload = run_report(args, logger)
    else:
        payload = run_studies(args, logger)

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
