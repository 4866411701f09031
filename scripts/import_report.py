"""
Import an exported report CSV from CLI.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from app.config import get_logging_settings
from app.logging_utils import configure_logging
from app.mappers.schema_mapper import REPORT_TYPES
from app.services.report_import_service import ReportImportError, get_report_import_service
from app.validators.mapping_validator import SchemaMismatchError
from db.session import SessionLocal


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import one report CSV into the report store.")
    parser.add_argument("report_type", choices=REPORT_TYPES, help="Report type of the CSV.")
    parser.add_argument("csv_path", type=Path, help="Path to the exported CSV file.")
    args = parser.parse_args(argv)

    configure_logging(get_logging_settings().level)

    try:
        csv_text = args.csv_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Unable to read {args.csv_path}: {exc}", file=sys.stderr)
        return 1

    service = get_report_import_service()
    with SessionLocal() as db:
        try:
            summary = service.import_csv(report_type=args.report_type, csv_text=csv_text, db=db)
        except SchemaMismatchError as exc:
            print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
            return 2
        except ReportImportError as exc:
            print(str(exc), file=sys.stderr)
            return 1

    print(json.dumps(asdict(summary), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
