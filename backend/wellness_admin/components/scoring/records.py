"""Plain records handed from the persistence layer to the scoring engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class OptionRecord:
    id: str
    value: float
    text: str
    order: int


@dataclass(frozen=True)
class QuestionRecord:
    id: str
    text: str
    order: int
    response_type: str
    options: Tuple[OptionRecord, ...] = field(default_factory=tuple)
    domain: Optional[str] = None
    reverse_scored: bool = False

    @property
    def max_option_value(self) -> float:
        return max((option.value for option in self.options), default=0.0)
