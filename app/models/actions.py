from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class SelectCategory:
    category: str


@dataclass(frozen=True, slots=True)
class SelectPage:
    page: int


ListAction = Union[SelectCategory, SelectPage]
