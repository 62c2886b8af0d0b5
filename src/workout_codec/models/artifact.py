"""Export outputs: encoded artifacts and structured results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EncodedArtifact:
    """Encoder output: a text or binary payload plus a suggested filename."""

    filename: str
    content: str | bytes
    media_type: str = "application/octet-stream"

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, bytes)

    def as_bytes(self) -> bytes:
        """Payload as bytes; text payloads are UTF-8 encoded."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a single export call. Failures are data, never raised."""

    success: bool
    filename: str = ""
    error: str | None = None
    artifact: EncodedArtifact | None = None


@dataclass(frozen=True)
class BatchExportResult:
    """Outcome of exporting every workout of a plan into one archive."""

    exported: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)
    archive: EncodedArtifact | None = None
