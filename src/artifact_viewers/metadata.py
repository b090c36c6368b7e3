"""Output metadata document models."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from artifact_viewers.errors import MetadataError, SchemaError, ValidationError


class SchemaField(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None


class PlotMetadata(BaseModel):
    """One visualization request from an output metadata document.

    Every field is optional at this level; each plot builder checks the
    fields its plot type requires, so a bad record never invalidates the
    rest of the document.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    type: Optional[str] = None
    source: Optional[str] = None
    storage: Optional[str] = None
    format: Optional[str] = None
    header: Optional[List[str]] = None
    labels: Optional[List[str]] = None
    column_schema: Optional[Any] = Field(default=None, alias="schema")
    predicted_col: Optional[str] = None
    target_col: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlotMetadata":
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Plot metadata must be an object, got {type(data).__name__}."
            )
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Malformed metadata: {exc.error_count()} invalid field(s).",
                context={"errors": exc.errors(include_url=False)},
            ) from exc

    def schema_fields(self) -> Optional[List[SchemaField]]:
        """Return the column schema, or None when it is not an array."""
        if not isinstance(self.column_schema, list):
            return None
        fields: List[SchemaField] = []
        for index, item in enumerate(self.column_schema):
            if not isinstance(item, Mapping):
                fields.append(SchemaField())
                continue
            try:
                fields.append(SchemaField.model_validate(dict(item)))
            except PydanticValidationError as exc:
                raise SchemaError(
                    f"Malformed schema, item {index} must be a "
                    '{"name": string, "type": string} object.'
                ) from exc
        return fields

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class OutputMetadata(BaseModel):
    """Document wrapper holding the list of plot requests."""

    model_config = ConfigDict(extra="allow")

    # Entries are validated one at a time by the resolver.
    outputs: List[Any]

    @classmethod
    def parse_document(cls, text: str) -> "OutputMetadata":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MetadataError(f"Invalid JSON: {exc}") from exc
        if not isinstance(payload, dict) or payload.get("outputs") is None:
            raise MetadataError(
                '"outputs" field required but not found on metadata file'
            )
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise MetadataError('"outputs" must be an array') from exc


__all__ = ["SchemaField", "PlotMetadata", "OutputMetadata"]
