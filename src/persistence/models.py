"""
Persisted mastery document.

The whole learner state is one JSON document:

    {
        "factMastery": {"3+7": {"operand1": 3, "operand2": 7, "operator": "+", "strength": 2}},
        "gradeProgress": {"3": {"currentMaxAddend": 6, "currentMaxFactor": 5}}
    }

Missing or null sub-maps load as empty maps.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.keys import fact_key, normalize_operands
from src.core.operators import Operator, OperatorFamily

MAX_STRENGTH = 5
MASTERED_STRENGTH = 3


class FactMastery(BaseModel):
    """Mastery state for one fact."""

    model_config = ConfigDict(populate_by_name=True)

    operand1: int = Field(ge=0)
    operand2: int = Field(ge=0)
    operator: Operator
    strength: int = Field(default=0, ge=0, le=MAX_STRENGTH)
    attempts: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)

    @classmethod
    def new(cls, operand1: int, operand2: int, operator: Operator) -> FactMastery:
        """Unseen fact with normalized operands."""
        first, second = normalize_operands(operand1, operand2, operator)
        return cls(operand1=first, operand2=second, operator=operator)

    @property
    def key(self) -> str:
        return fact_key(self.operand1, self.operand2, self.operator)

    @property
    def family(self) -> OperatorFamily:
        return self.operator.family

    @property
    def is_mastered(self) -> bool:
        return self.strength >= MASTERED_STRENGTH

    @property
    def is_retired(self) -> bool:
        return self.strength >= MAX_STRENGTH

    def touches(self, value: int) -> bool:
        """True when either operand equals value."""
        return self.operand1 == value or self.operand2 == value


class GradeProgress(BaseModel):
    """Current adaptive ceilings for one grade."""

    model_config = ConfigDict(populate_by_name=True)

    current_max_addend: int = Field(ge=0, alias="currentMaxAddend")
    current_max_factor: int = Field(ge=0, alias="currentMaxFactor")

    def ceiling(self, family: OperatorFamily) -> int:
        if family is OperatorFamily.ADDEND:
            return self.current_max_addend
        return self.current_max_factor

    def set_ceiling(self, family: OperatorFamily, value: int) -> None:
        if family is OperatorFamily.ADDEND:
            self.current_max_addend = value
        else:
            self.current_max_factor = value


class MasteryDocument(BaseModel):
    """Everything persisted between sessions."""

    model_config = ConfigDict(populate_by_name=True)

    fact_mastery: dict[str, FactMastery] = Field(default_factory=dict, alias="factMastery")
    grade_progress: dict[int, GradeProgress] = Field(default_factory=dict, alias="gradeProgress")

    @field_validator("fact_mastery", "grade_progress", mode="before")
    @classmethod
    def _missing_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase wire names."""
        return self.model_dump(by_alias=True, mode="json")
