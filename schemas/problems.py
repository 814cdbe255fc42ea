from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Literal, Optional
from utils.constants import (
    DEFAULT_CAPACITY_MODE,
    DEFAULT_QUEENS_SIZE,
    DEFAULT_SIBLING_POLICY,
)


# Define problem configuration models
class QueensProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: int = Field(default=DEFAULT_QUEENS_SIZE, ge=1)
    maxSolutions: Optional[int] = Field(default=None, ge=1)


class HamiltonianProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    adjacency: List[List[int]]
    directed: bool = True

    @model_validator(mode="after")
    def check_square(self) -> "HamiltonianProblem":
        """Reject non-square matrices early; entry values are checked by the builder."""
        n = len(self.adjacency)
        if n == 0 or any(len(row) != n for row in self.adjacency):
            raise ValueError("adjacency must be a non-empty square matrix")
        return self


class PartitionProblem(BaseModel):
    """
    CPU-to-role partitioning problem.

    `siblings[u]` is the physical core of unit `u`; `zones` maps each NUMA zone
    to its member units. Every unit takes role 0 or 1, and role 1 is the one
    counted towards zone loads and the global total.
    """

    model_config = ConfigDict(frozen=True)

    unitCount: int = Field(ge=1)
    siblings: List[int]
    zones: Dict[str, List[int]]
    total: int = Field(ge=0)
    zoneMin: int = Field(default=0, ge=0)
    zoneMax: Optional[int] = Field(default=None, ge=0)
    capacityMode: Literal["lower", "range"] = DEFAULT_CAPACITY_MODE
    siblingPolicy: Literal["exclusive", "uniform"] = DEFAULT_SIBLING_POLICY
    maxRounds: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def zones_from_list(cls, values: Any) -> Any:
        """
        Accept zones as a plain list of member lists, as static NUMA tables are
        usually written, and name them `zone_0`, `zone_1`, ...
        """
        if isinstance(values, dict) and isinstance(values.get("zones"), list):
            values = dict(values)
            values["zones"] = {f"zone_{i}": list(m) for i, m in enumerate(values["zones"])}
        return values

    @model_validator(mode="after")
    def check_capacity(self) -> "PartitionProblem":
        if self.capacityMode == "range" and self.zoneMax is None:
            raise ValueError("capacityMode 'range' requires zoneMax")
        return self


class BooleanProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    variables: List[str] = Field(min_length=1)
    clauses: List[List[str]] = Field(default_factory=list)
