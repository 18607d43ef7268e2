"""Configuration classes for lane optimization."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class SortStrategy(str, Enum):
    """Orderings the greedy assigner can sweep trackers in."""

    START_DATE = "start_date"
    DURATION = "duration"
    END_DATE = "end_date"
    PRIORITY = "priority"  # Critical trackers biased into the lowest lanes


class OptimizationObjective(str, Enum):
    """What an optimization pass targets. Passes cycle in this order."""

    COMPACTION = "compaction"
    GAP_MINIMIZATION = "gap_minimization"
    BALANCING = "balancing"


class OptimizationConfig(BaseModel):
    """Configuration for the lane optimizer.

    Balancing moves trackers out of a lane holding more than
    ``overload_factor`` x the average and into lanes holding fewer than
    ``underload_factor`` x average. Moves out of a source stop once it is at
    or below ``settle_factor`` x average. As a policy choice, moves into a
    destination also stop once it reaches the average.
    """

    # Which passes are enabled
    prioritize_compactness: bool = True
    minimize_gaps: bool = True
    balance_lanes: bool = True

    # Effort bounds
    max_optimization_passes: int = Field(default=3, ge=0)
    target_packing_efficiency: float = Field(default=0.8, ge=0.0, le=1.0)

    # Compaction: sort orders tried, and how many low lanes critical trackers prefer
    compaction_strategies: list[SortStrategy] = Field(
        default_factory=lambda: list(SortStrategy)
    )
    critical_lane_bias: int = Field(default=3, ge=0)

    # Balancing thresholds, as multiples of the average trackers per lane
    overload_factor: float = Field(default=1.5, gt=0.0)
    underload_factor: float = Field(default=0.5, ge=0.0)
    settle_factor: float = Field(default=1.2, gt=0.0)

    @model_validator(mode="after")
    def validate_balance_factors(self) -> "OptimizationConfig":
        """Ensure the balancing thresholds are ordered sensibly."""
        if self.underload_factor >= self.overload_factor:
            raise ValueError("underload_factor must be below overload_factor")
        if self.settle_factor > self.overload_factor:
            raise ValueError("settle_factor must not exceed overload_factor")
        return self

    def pass_enabled(self, objective: OptimizationObjective) -> bool:
        return {
            OptimizationObjective.COMPACTION: self.prioritize_compactness,
            OptimizationObjective.GAP_MINIMIZATION: self.minimize_gaps,
            OptimizationObjective.BALANCING: self.balance_lanes,
        }[objective]
