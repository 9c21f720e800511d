"""
Media Storage Protocol
Contract for the external image host used by blogs
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol, Tuple

CleanupStatus = Literal["ok", "not_found", "failed"]


@dataclass(frozen=True, slots=True)
class UploadedMedia:
    url: str
    public_id: str


@dataclass(frozen=True, slots=True)
class DestroyResult:
    result: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.result == "ok"


@dataclass(frozen=True, slots=True)
class CleanupEntry:
    public_id: str
    status: CleanupStatus
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MediaCleanupReport:
    """Outcome of best-effort media deletion after rows were already removed."""
    entries: Tuple[CleanupEntry, ...] = ()

    @property
    def failed(self) -> Tuple[CleanupEntry, ...]:
        return tuple(entry for entry in self.entries if entry.status == "failed")

    def with_entry(self, entry: CleanupEntry) -> "MediaCleanupReport":
        return MediaCleanupReport(entries=self.entries + (entry,))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempted": len(self.entries),
            "failed": len(self.failed),
            "results": [
                {"public_id": entry.public_id, "status": entry.status, "error": entry.error}
                for entry in self.entries
            ],
        }


class MediaStorage(Protocol):
    """
    External image host.

    Implementations raise ExternalServiceError when the host cannot be reached
    or rejects the request outright.
    """

    async def upload(self, data: bytes, filename: str, folder: str) -> UploadedMedia:
        ...

    async def destroy(self, public_id: str) -> DestroyResult:
        """The host answers "ok", "not found" or another status string."""
        ...
