from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_PLAYER_NAME = "EcoHero"
DEFAULT_WORLD_ID = "w1"


@dataclass
class LevelProgress:
    """Best and latest result for one level. Created on first completion."""

    completed: bool = False
    stars: int = 0
    score: float = 0
    max_score: float = 0
    high_score: float = 0
    correct_answers: Optional[int] = None


@dataclass
class PlayerState:
    name: str = DEFAULT_PLAYER_NAME
    green_score: int = 0
    total_correct_answers: int = 0
    level_progress: Dict[str, LevelProgress] = field(default_factory=dict)
    # Ordered and duplicate-free; treated as a set.
    badges: List[str] = field(default_factory=list)
    current_world_id: str = DEFAULT_WORLD_ID

    def copy(self) -> PlayerState:
        return copy.deepcopy(self)
