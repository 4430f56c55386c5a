"""Data models for time distribution.

All models live for a single distribution call. Nothing here is persisted:
the caller owns writing AllocationResult.new_seconds back to the tracker.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from worklog_engine.distribution.rounding import seconds_to_minutes

MIN_WEIGHT = 1
MAX_WEIGHT = 10
NEUTRAL_WEIGHT = 5


class DistributionMode(StrEnum):
    EQUAL = "equal"
    SMART = "smart"

    @classmethod
    def _missing_(cls, value: object) -> "DistributionMode | None":
        # "ai" is the name the worklog editor UI uses for smart mode
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "ai":
                return cls.SMART
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class WeightSource(StrEnum):
    UNIFORM = "uniform"  # equal mode
    SCORED = "scored"  # returned by the scorer
    DEFAULTED = "defaulted"  # scorer omitted this entry or sent garbage
    HEURISTIC = "heuristic"  # scorer failed, comment-length fallback


class TimeEntry(BaseModel):
    """An existing worklog subject to reallocation.

    Attributes:
        id: Opaque worklog identifier
        group_key: Parent issue key, used only to label results
        label: Issue summary, used for scoring and display
        comment_text: Worklog comment as plain text, scoring input only
        current_seconds: Currently stored duration
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    group_key: str = ""
    label: str = ""
    comment_text: str = ""
    current_seconds: int = Field(default=0, ge=0)

    @property
    def current_minutes(self) -> int:
        return seconds_to_minutes(self.current_seconds)


class Weight(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: str
    value: int = Field(..., ge=MIN_WEIGHT, le=MAX_WEIGHT)
    source: WeightSource = WeightSource.UNIFORM


class ScoringItem(BaseModel):
    """One worklog as presented to the complexity scorer."""

    id: str
    label: str
    comment_text: str

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "ScoringItem":
        return cls(id=entry.id, label=entry.label, comment_text=entry.comment_text)


class ComplexityScore(BaseModel):
    """Complexity score for one worklog.

    The score is deliberately unconstrained here; the weight resolver rounds
    and clamps it, so out-of-range values never reach the allocator.
    """

    id: str = Field(..., description="Worklog id exactly as given in the input")
    score: float = Field(..., description="Complexity from 1 (trivial) to 10 (very complex)")
    reasoning: str | None = None


class AllocationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: str
    group_key: str
    label: str
    new_minutes: int = Field(..., ge=0)
    new_seconds: int = Field(..., ge=0)
    new_hours: float
    delta_minutes: int

    @classmethod
    def from_entry(cls, entry: TimeEntry, new_minutes: int) -> "AllocationResult":
        return cls(
            entry_id=entry.id,
            group_key=entry.group_key,
            label=entry.label,
            new_minutes=new_minutes,
            new_seconds=new_minutes * 60,
            new_hours=round(new_minutes / 60, 2),  # display only
            delta_minutes=new_minutes - entry.current_minutes,
        )


class WeightResolution(BaseModel):
    """Weights for one call plus how they were obtained."""

    mode: DistributionMode
    weights: list[Weight]
    used_fallback: bool = False
    warnings: list[str] = Field(default_factory=list)

    @property
    def values(self) -> list[int]:
        return [w.value for w in self.weights]


class DistributionOutcome(BaseModel):
    mode: DistributionMode
    target_hours: float
    target_minutes: int
    results: list[AllocationResult]
    weights: list[Weight]
    used_fallback: bool = False
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_minutes(self) -> int:
        return sum(r.new_minutes for r in self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_hours(self) -> float:
        return round(self.total_minutes / 60, 2)


class ApplyReport(BaseModel):
    """Outcome of writing an allocation back, entry by entry."""

    applied: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


ScoreFn = Callable[[list[ScoringItem]], Awaitable[Sequence[ComplexityScore | Mapping[str, object]]]]
WorklogWriter = Callable[[TimeEntry, int], Awaitable[None]]
