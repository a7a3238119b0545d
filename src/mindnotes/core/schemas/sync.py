"""
Mirror sync schemas - per-note outcomes and batch reports.
"""

import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Provider = Literal["drive", "github"]


class SyncItemResult(BaseModel):
    """Outcome of mirroring one note to one provider."""

    note_id: uuid.UUID = Field(description="Mirrored note")
    provider: Provider = Field(description="Mirror that was written")
    status: Literal["success", "error"] = Field(description="Outcome")
    external_ref: Optional[str] = Field(default=None, description="Drive file id or repository path")
    error: Optional[str] = Field(default=None, description="Error message when status is error")

    @classmethod
    def success(cls, note_id: uuid.UUID, provider: str, external_ref: str) -> "SyncItemResult":
        return cls(note_id=note_id, provider=provider, status="success", external_ref=external_ref)

    @classmethod
    def failure(cls, note_id: uuid.UUID, provider: str, error: str) -> "SyncItemResult":
        return cls(note_id=note_id, provider=provider, status="error", error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"


class SyncReport(BaseModel):
    """Result of a batch sync. Results keep the order notes were processed in."""

    provider: Provider
    results: List[SyncItemResult] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0

    @classmethod
    def from_results(cls, provider: str, results: List[SyncItemResult]) -> "SyncReport":
        succeeded = sum(1 for r in results if r.ok)
        return cls(
            provider=provider,
            results=results,
            succeeded=succeeded,
            failed=len(results) - succeeded,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "provider": "github",
                "results": [
                    {
                        "note_id": "123e4567-e89b-12d3-a456-426614174000",
                        "provider": "github",
                        "status": "success",
                        "external_ref": "notes/Project_ideas.md",
                        "error": None,
                    },
                    {
                        "note_id": "223e4567-e89b-12d3-a456-426614174000",
                        "provider": "github",
                        "status": "error",
                        "external_ref": None,
                        "error": "GitHub API returned 409: sha mismatch",
                    },
                ],
                "succeeded": 1,
                "failed": 1,
            }
        }
    )


class GitHubSyncRequest(BaseModel):
    """Target repository for a GitHub batch sync; falls back to the stored default."""

    owner: Optional[str] = Field(default=None, min_length=1, max_length=100)
    repo: Optional[str] = Field(default=None, min_length=1, max_length=100)
