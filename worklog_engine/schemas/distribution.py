"""Distribution API schemas."""

from pydantic import BaseModel, Field, field_validator

from worklog_engine.distribution.models import AllocationResult, DistributionMode, TimeEntry, Weight


class DistributionPreviewRequest(BaseModel):
    """Request to preview a time distribution."""

    entries: list[TimeEntry] = Field(..., description="Worklogs to distribute across")
    target_hours: float | None = Field(None, description="Target total hours; defaults to the configured daily target")
    mode: DistributionMode = Field(DistributionMode.EQUAL, description="'equal' or 'smart'")

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value: object) -> object:
        """Accept the editor's "ai" alias and any casing."""
        if isinstance(value, str):
            return DistributionMode(value)
        return value


class DistributionPreviewResponse(BaseModel):
    """Preview of a time distribution. Nothing has been written."""

    mode: DistributionMode
    target_hours: float
    target_minutes: int
    total_minutes: int
    total_hours: float
    results: list[AllocationResult]
    weights: list[Weight]
    used_fallback: bool = Field(..., description="True when smart scoring fell back to comment length")
    warnings: list[str] = Field(default_factory=list)


class DistributionErrorResponse(BaseModel):
    code: str
    details: list[str]
