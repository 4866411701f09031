"""
app/validators/mapping_validator.py

Header validation for report schema mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    header: str | None = None
    context: dict[str, Any] | None = None


class SchemaMismatchError(ValueError):
    """
    Raised when a CSV header row does not satisfy a report schema.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    @property
    def missing_headers(self) -> list[str]:
        return [
            error.header
            for error in self.errors
            if error.code == "required_header_missing" and error.header
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "header": error.header,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class HeaderValidator:
    """
    Validates that every required header is present in a CSV header row.
    """

    def __init__(self, *, required_headers: Iterable[str]) -> None:
        self._required_headers = tuple(sorted(set(required_headers)))

    def validate(self, *, headers: Sequence[str], report_type: str | None = None) -> None:
        """
        Raise ``SchemaMismatchError`` listing every missing required header.

        Presence is set membership: column order and extra headers are ignored.
        """

        present = set(headers)
        errors = [
            MappingErrorDetail(
                code="required_header_missing",
                message="Required header is missing from the CSV header row.",
                header=required,
                context={"source_headers": list(headers)},
            )
            for required in self._required_headers
            if required not in present
        ]

        if errors:
            missing_csv = ", ".join(error.header for error in errors if error.header)
            scope = f" for report type '{report_type}'" if report_type else ""
            raise SchemaMismatchError(
                message=f"CSV headers do not match the expected template{scope}. Missing: {missing_csv}.",
                errors=errors,
            )
