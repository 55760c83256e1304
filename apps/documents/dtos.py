"""
Normalized document records shared by every source connector.

A ``Document`` is the storage-ready representation of one upstream record.
A ``DataRef`` identifies where a batch of documents was persisted; connectors
pass it back to their caller without looking inside.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class Document:
    """Storage-ready document produced from a source record."""

    id: str
    content: str
    title: str
    source: str
    url: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "title": self.title,
            "source": self.source,
            "url": self.url,
            "metadata": dict(self.metadata),
            "updated_at": _format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        return cls(
            id=data["id"],
            content=data.get("content", ""),
            title=data.get("title", ""),
            source=data.get("source", ""),
            url=data.get("url", ""),
            metadata={str(k): str(v) for k, v in (data.get("metadata") or {}).items()},
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


@dataclass(frozen=True)
class DataRef:
    """Opaque handle for a persisted document batch."""

    backend: str
    key: str

    def to_dict(self) -> dict[str, str]:
        return {"backend": self.backend, "key": self.key}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataRef:
        return cls(backend=data["backend"], key=data["key"])

    def __str__(self) -> str:
        return f"{self.backend}:{self.key}"
