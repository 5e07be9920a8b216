"""Request and response schema for the patch API.

Every front-end renders outcomes through PatchResponse, so the HTTP service
and `patch-engine generate --format json` emit identical records.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from patching.models import Accepted, Failed, PatchOutcome, Rejected, SizeStats


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatchRequestBase(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    output_dir: Path | None = None
    include_content: bool = True

    @field_validator("output_dir", mode="before")
    @classmethod
    def blank_means_no_output(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GeneratePatchRequest(PatchRequestBase):
    """Patch two files that live on the server."""

    old_file: Path
    new_file: Path


class EvaluateTextRequest(PatchRequestBase):
    """Patch two texts sent in the request body."""

    old_text: str
    new_text: str


class PatchStats(WireModel):
    old_size: int
    new_size: int
    patch_size: int
    size_ratio: float | None = None
    operations_count: int

    @classmethod
    def from_stats(cls, stats: SizeStats) -> "PatchStats":
        return cls(
            old_size=stats.old_size,
            new_size=stats.new_size,
            patch_size=stats.patch_size,
            size_ratio=stats.size_ratio,
            operations_count=stats.operation_count,
        )


class PatchResponse(WireModel):
    """Serialized PatchOutcome."""

    success: bool
    patch_file_path: str | None = None
    patch_content: str | None = None
    source_hash: str | None = None
    target_hash: str | None = None
    reason: str | None = None
    recommendation: str | None = None
    error: str | None = None
    stats: PatchStats | None = None

    @classmethod
    def from_outcome(cls, outcome: PatchOutcome) -> "PatchResponse":
        if isinstance(outcome, Accepted):
            return cls(
                success=True,
                patch_file_path=str(outcome.persisted_path) if outcome.persisted_path else None,
                patch_content=outcome.patch_document,
                source_hash=str(outcome.source_fingerprint),
                target_hash=str(outcome.target_fingerprint),
                stats=PatchStats.from_stats(outcome.stats),
            )

        if isinstance(outcome, Rejected):
            return cls(
                success=False,
                reason=outcome.reason.value,
                recommendation=outcome.recommendation.value,
                stats=PatchStats.from_stats(outcome.stats),
            )

        if isinstance(outcome, Failed):
            return cls(success=False, reason=outcome.error_kind.value, error=outcome.message)

        raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    @classmethod
    def error_response(cls, message: str, reason: str | None = None) -> "PatchResponse":
        """Response for requests rejected before reaching the engine."""
        return cls(success=False, reason=reason, error=message)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and unset fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
