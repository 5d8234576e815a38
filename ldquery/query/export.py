"""Export and import query configurations as versioned JSON documents."""

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from ldquery.query.models import QuerySpec
from ldquery.utils import QueryConfigError

EXPORT_VERSION = "1.0"


class ExportedQuery(BaseModel):
    version: Literal["1.0"]
    title: str = Field(min_length=1)
    spec: QuerySpec
    exported_at: datetime


def export_query(spec: QuerySpec, title: str) -> dict[str, Any]:
    """Serialize a query with a title into a JSON-compatible dict."""
    document = ExportedQuery(
        version=EXPORT_VERSION,
        title=title,
        spec=spec,
        exported_at=datetime.now(timezone.utc),
    )
    return document.model_dump(mode="json")


def export_query_json(spec: QuerySpec, title: str, indent: int = 2) -> str:
    return json.dumps(export_query(spec, title), indent=indent, ensure_ascii=False)


def import_query(payload: str | Mapping[str, Any]) -> ExportedQuery:
    """Parse and validate an exported query document.

    Raises:
        QueryConfigError: when the payload is not JSON, has an unsupported
            version, or carries an invalid query.
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise QueryConfigError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, Mapping):
        raise QueryConfigError("Exported query must be a JSON object")

    if payload.get("version") != EXPORT_VERSION:
        raise QueryConfigError(f"Invalid or unsupported version: {payload.get('version')!r}")

    try:
        return ExportedQuery.model_validate(dict(payload))
    except ValidationError as e:
        raise QueryConfigError(f"Invalid exported query: {e}") from e
