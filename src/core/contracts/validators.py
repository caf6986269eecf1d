"""
JSON Schema Contract Validators

Validates payloads that leave the engine (change notifications, price reads)
against formal JSON Schema contracts using the jsonschema library.

Schemas (src/core/contracts/schema/):
- project_event.json
- price_snapshot.json
"""

import json
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Loads JSON Schema files shipped next to this module.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Loaded schema cache
        self._schemas: dict[str, dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> dict[str, Any]:
        """
        Load a JSON Schema file.

        Args:
            schema_name: Schema name without extension (e.g. 'project_event')

        Returns:
            Parsed schema as dict

        Raises:
            FileNotFoundError: If the schema file does not exist
            ValueError: If the file is not a valid Draft 2020-12 schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation of the schema itself
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Module-wide loader instance
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Base validator: wraps a Draft 2020-12 validator for one named schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: If data does not match the schema
        """
        self.validator.validate(data)

    def is_valid(self, data: dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: dict[str, Any]):
        """Yields a ValidationError for every violation found."""
        return self.validator.iter_errors(data)


class ProjectEventValidator(ContractValidator):
    """Validator for change notifications (created/bought/sold)."""

    def __init__(self):
        super().__init__("project_event")


class PriceSnapshotValidator(ContractValidator):
    """Validator for price reads."""

    def __init__(self):
        super().__init__("price_snapshot")

