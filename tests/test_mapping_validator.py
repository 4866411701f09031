from __future__ import annotations

import unittest

from app.validators.mapping_validator import HeaderValidator, SchemaMismatchError


class TestHeaderValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = HeaderValidator(
            required_headers=("ID", "Ticket status", "Subject", "Severity", "Requested"),
        )

    def test_accepts_headers_in_any_order_with_extras(self) -> None:
        self.validator.validate(
            headers=["Requested", "Extra", "Severity", "Subject", "Ticket status", "ID"],
        )

    def test_raises_with_every_missing_header(self) -> None:
        with self.assertRaises(SchemaMismatchError) as ctx:
            self.validator.validate(
                headers=["ID", "Subject", "Requested"],
                report_type="incidents",
            )

        self.assertEqual(ctx.exception.missing_headers, ["Severity", "Ticket status"])
        codes = {error.code for error in ctx.exception.errors}
        self.assertEqual(codes, {"required_header_missing"})
        self.assertIn("incidents", str(ctx.exception))
        self.assertIn("Missing: Severity, Ticket status", str(ctx.exception))

    def test_header_match_is_case_sensitive(self) -> None:
        with self.assertRaises(SchemaMismatchError) as ctx:
            self.validator.validate(
                headers=["ID", "Ticket Status", "Subject", "Severity", "Requested"],
            )

        self.assertEqual(ctx.exception.missing_headers, ["Ticket status"])

    def test_to_dict_is_structured(self) -> None:
        with self.assertRaises(SchemaMismatchError) as ctx:
            self.validator.validate(headers=["ID"])

        payload = ctx.exception.to_dict()
        self.assertIn("message", payload)
        self.assertEqual(len(payload["errors"]), 4)
        first = payload["errors"][0]
        self.assertEqual(first["code"], "required_header_missing")
        self.assertEqual(first["context"], {"source_headers": ["ID"]})

    def test_schema_mismatch_is_value_error(self) -> None:
        self.assertTrue(issubclass(SchemaMismatchError, ValueError))


if __name__ == "__main__":
    unittest.main()
