"""
Info record schema and its canonical JSON encoding.
The wire field names and their order are fixed; stored bytes must stay
byte-compatible with records written by earlier deployments.
"""

import json
import re
from dataclasses import dataclass
from typing import Dict

from .errors import SerializationError

# Discriminator shared by every persisted info record
DOC_TYPE = "info"

# Attribute name -> wire field name, in canonical order
WIRE_FIELDS = {
    "kind": "docType",
    "id": "InfoID",
    "category": "InfoType",
    "content": "Content",
    "timestamp": "UploadTime",
    "submitter": "Uploader",
    "group": "Department",
}

# Attributes the query engine may filter on
QUERYABLE_ATTRIBUTES = ("category", "submitter", "group")

_ESCAPE_PATTERN = re.compile('\\\\[\\\\"/bfnrtu]|[<>&\u2028\u2029]')
_ESCAPE_REPLACEMENTS = {
    "\\b": "\\u0008",
    "\\f": "\\u000c",
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_html(match) -> str:
    token = match.group(0)
    return _ESCAPE_REPLACEMENTS.get(token, token)


def canonical_json(document: Dict[str, str]) -> bytes:
    """Encode a flat string mapping as compact, HTML-safe JSON bytes."""
    try:
        text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        return _ESCAPE_PATTERN.sub(_escape_html, text).encode("utf-8")
    except (TypeError, ValueError, UnicodeEncodeError) as e:
        raise SerializationError(f"Failed to encode record: {e}") from e


def wire_field(attribute: str) -> str:
    """Map a record attribute name to its JSON field name."""
    try:
        return WIRE_FIELDS[attribute]
    except KeyError:
        raise ValueError(f"Unknown record attribute: {attribute}") from None


@dataclass
class InfoRecord:
    id: str
    category: str
    content: str
    timestamp: str
    submitter: str
    group: str
    kind: str = DOC_TYPE

    @classmethod
    def normalized(cls, id: str, category: str, content: str, timestamp: str,
                   submitter: str, group: str) -> "InfoRecord":
        """Build a record with category, submitter and group lowercased."""
        return cls(
            id=id,
            category=category.lower(),
            content=content,
            timestamp=timestamp,
            submitter=submitter.lower(),
            group=group.lower(),
        )

    def to_wire(self) -> Dict[str, str]:
        return {field: getattr(self, attribute) for attribute, field in WIRE_FIELDS.items()}

    def to_json(self) -> bytes:
        """Canonical persisted encoding."""
        return canonical_json(self.to_wire())

    @classmethod
    def from_json(cls, data: bytes) -> "InfoRecord":
        """Decode stored bytes back into a record."""
        try:
            document = json.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to decode record: {e}") from e

        if not isinstance(document, dict) or document.get("docType") != DOC_TYPE:
            raise SerializationError("Stored value is not an info record")

        try:
            values = {attribute: document[field] for attribute, field in WIRE_FIELDS.items()}
        except KeyError as e:
            raise SerializationError(f"Record is missing field {e}") from e

        return cls(**values)
