"""
app/mappers/schema_mapper.py

Report schema definitions and CSV-to-record mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from app.domain.report_records import NormalizedRecord
from app.parsing.csv_tokenizer import parse_csv_rows
from app.validators.mapping_validator import HeaderValidator

HeaderSpec = str | tuple[str, ...]


class ReportType:
    INCIDENTS = "incidents"
    SUPPORT_TICKETS = "support-tickets"
    JIRAS = "jiras"
    PRODUCT_REQUESTS = "product-requests"
    IMPLEMENTATION_REQUESTS = "implementation-requests"


REPORT_TYPES: tuple[str, ...] = (
    ReportType.INCIDENTS,
    ReportType.SUPPORT_TICKETS,
    ReportType.JIRAS,
    ReportType.PRODUCT_REQUESTS,
    ReportType.IMPLEMENTATION_REQUESTS,
)


class UnknownReportTypeError(ValueError):
    """
    Raised when a report type outside REPORT_TYPES is requested.
    """

    def __init__(self, report_type: str) -> None:
        allowed = ", ".join(REPORT_TYPES)
        super().__init__(f"Unknown report type: {report_type!r}. Allowed values: {allowed}.")
        self.report_type = report_type


@dataclass(frozen=True)
class ReportSchema:
    """
    Required headers and semantic key map for one report type.

    A key map entry is either one header name or an ordered tuple of
    alternative header names; the first alternative present wins.
    """

    report_type: str
    required_headers: frozenset[str]
    key_map: Mapping[str, HeaderSpec]


_INCIDENT_REQUIRED_HEADERS = frozenset(
    {"ID", "Ticket status", "Subject", "Severity", "Requested"}
)

_INCIDENT_KEY_MAP: Mapping[str, HeaderSpec] = MappingProxyType(
    {
        "id": "ID",
        "ticketStatus": "Ticket status",
        "organization": ("Organization", "Client Name", "Project name"),
        "requester": "Requester",
        "subject": "Subject",
        "priority": ("Severity", "Priority"),
        "sla": "SLA",
        "requested": "Requested",
        "updated": "Updated",
        "ticketForm": "Ticket form",
        "orgTier": "Org Tier",
        "rcaSummary": "RCA Summary",
    }
)

_SUPPORT_TICKET_REQUIRED_HEADERS = frozenset(
    {"ID", "Ticket status", "Organization", "Subject", "Priority", "Requested"}
)

_SUPPORT_TICKET_KEY_MAP: Mapping[str, HeaderSpec] = MappingProxyType(
    {
        "id": "ID",
        "ticketStatus": "Ticket status",
        "organization": "Organization",
        "subject": "Subject",
        "group": "Group",
        "assignee": "Assignee",
        "priority": "Priority",
        "criticality": "Criticality",
        "sla": "SLA",
        "requested": "Requested",
        "updated": "Updated",
        "associatedJira": "Associated Jira",
    }
)

_JIRA_REQUIRED_HEADERS = frozenset(
    {"Issue key", "Status", "Summary", "Priority", "Created"}
)

_JIRA_KEY_MAP: Mapping[str, HeaderSpec] = MappingProxyType(
    {
        "id": "Issue key",
        "ticketStatus": "Status",
        "organization": ("Client Name", "Project name"),
        "subject": "Summary",
        "issueType": "Issue Type",
        "priority": "Priority",
        "assignee": "Assignee",
        "requested": "Created",
        "updated": "Updated",
    }
)


def _incident_like(report_type: str) -> ReportSchema:
    return ReportSchema(
        report_type=report_type,
        required_headers=_INCIDENT_REQUIRED_HEADERS,
        key_map=_INCIDENT_KEY_MAP,
    )


REPORT_SCHEMAS: Mapping[str, ReportSchema] = MappingProxyType(
    {
        ReportType.INCIDENTS: _incident_like(ReportType.INCIDENTS),
        ReportType.SUPPORT_TICKETS: ReportSchema(
            report_type=ReportType.SUPPORT_TICKETS,
            required_headers=_SUPPORT_TICKET_REQUIRED_HEADERS,
            key_map=_SUPPORT_TICKET_KEY_MAP,
        ),
        ReportType.JIRAS: ReportSchema(
            report_type=ReportType.JIRAS,
            required_headers=_JIRA_REQUIRED_HEADERS,
            key_map=_JIRA_KEY_MAP,
        ),
        ReportType.PRODUCT_REQUESTS: _incident_like(ReportType.PRODUCT_REQUESTS),
        ReportType.IMPLEMENTATION_REQUESTS: _incident_like(ReportType.IMPLEMENTATION_REQUESTS),
    }
)


def get_report_schema(report_type: str) -> ReportSchema:
    """
    Return the schema for ``report_type`` or raise ``UnknownReportTypeError``.
    """

    schema = REPORT_SCHEMAS.get(report_type)
    if schema is None:
        raise UnknownReportTypeError(report_type)
    return schema


class ReportSchemaMapper:
    """
    Projects raw CSV rows into normalized records for one report schema.
    """

    def parse(self, csv_text: str, schema: ReportSchema) -> list[NormalizedRecord]:
        """
        Validate headers and map every data row into a normalized record.

        Returns an empty list for empty or header-only CSV text.
        """

        records, _ = self.parse_with_row_numbers(csv_text, schema)
        return records

    def parse_with_row_numbers(
        self,
        csv_text: str,
        schema: ReportSchema,
    ) -> tuple[list[NormalizedRecord], list[int]]:
        """
        Same as ``parse`` but also returns each record's 1-based row number
        among the non-blank rows (the header row is row 1).
        """

        rows = parse_csv_rows(csv_text)
        if not rows:
            return [], []

        headers = [value.strip() for value in rows[0]]
        HeaderValidator(required_headers=schema.required_headers).validate(
            headers=headers,
            report_type=schema.report_type,
        )

        column_by_key = self.resolve_columns(headers=headers, schema=schema)
        records = [self.map_row(values=row, column_by_key=column_by_key) for row in rows[1:]]
        return records, list(range(2, len(rows) + 1))

    @staticmethod
    def resolve_columns(
        *,
        headers: Sequence[str],
        schema: ReportSchema,
    ) -> dict[str, int | None]:
        """
        Resolve each semantic key to a column index (None when absent).
        """

        index_by_header: dict[str, int] = {}
        for index, header in enumerate(headers):
            index_by_header.setdefault(header, index)

        resolved: dict[str, int | None] = {}
        for key, spec in schema.key_map.items():
            candidates = (spec,) if isinstance(spec, str) else spec
            resolved[key] = next(
                (index_by_header[name] for name in candidates if name in index_by_header),
                None,
            )
        return resolved

    @staticmethod
    def map_row(
        *,
        values: Sequence[str],
        column_by_key: Mapping[str, int | None],
    ) -> NormalizedRecord:
        """
        Map one raw row into a normalized record; short rows yield empty strings.
        """

        record: NormalizedRecord = {}
        for key, index in column_by_key.items():
            if index is None or index >= len(values):
                record[key] = ""
            else:
                record[key] = values[index]
        return record
