from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from ecohero.core.badges import validate_condition
from ecohero.core.stars import DEFAULT_GREEN_POINTS_PER_STAR


@dataclass(frozen=True)
class Level:
    id: str
    world_id: str
    order: int
    title: str = ""
    type: str = "quiz"
    difficulty: int = 1
    stars_required: int = 0


@dataclass(frozen=True)
class World:
    id: str
    order: int
    title: str = ""
    stars_to_unlock: int = 0


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)
    name: str = ""
    description: str = ""


class ContentRepository:
    """Read-only LEVELS / WORLDS / BADGES tables plus green-score rates."""

    def __init__(
        self,
        levels: Iterable[Level],
        worlds: Iterable[World],
        badges: Iterable[BadgeDefinition] = (),
        green_points_per_star: Optional[Dict[str, int]] = None,
    ) -> None:
        self._levels: Dict[str, Level] = {}
        for level in sorted(levels, key=lambda lv: (lv.world_id, lv.order)):
            if level.id in self._levels:
                raise ValueError(f"duplicate level id {level.id!r}")
            self._levels[level.id] = level
        self._worlds: Dict[str, World] = {}
        for world in sorted(worlds, key=lambda w: w.order):
            if world.id in self._worlds:
                raise ValueError(f"duplicate world id {world.id!r}")
            self._worlds[world.id] = world
        self._badges = list(badges)
        for badge in self._badges:
            validate_condition(badge.kind, badge.params)
        self._green_points = dict(green_points_per_star or {})

    def all_levels(self) -> List[Level]:
        return list(self._levels.values())

    def all_worlds(self) -> List[World]:
        return list(self._worlds.values())

    def badges(self) -> List[BadgeDefinition]:
        return list(self._badges)

    def get_level(self, level_id: str) -> Optional[Level]:
        return self._levels.get(level_id)

    def get_world(self, world_id: str) -> Optional[World]:
        return self._worlds.get(world_id)

    def levels_for_world(self, world_id: str) -> List[Level]:
        return sorted(
            (lv for lv in self._levels.values() if lv.world_id == world_id),
            key=lambda lv: lv.order,
        )

    def green_points_per_star(self, level_type: str) -> int:
        return int(self._green_points.get(level_type, self._green_points.get("default", DEFAULT_GREEN_POINTS_PER_STAR)))


def default_content_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "content"


def load_content(base_dir: Optional[Path] = None) -> ContentRepository:
    """Load the content tables from ``worlds.yaml``, ``levels.yaml`` and ``badges.yaml``."""
    base_dir = Path(base_dir) if base_dir is not None else default_content_dir()
    if not base_dir.exists():
        raise FileNotFoundError(f"Content directory not found: {base_dir}")

    worlds_raw = _read_yaml(base_dir / "worlds.yaml")
    levels_raw = _read_yaml(base_dir / "levels.yaml")
    badges_raw = _read_yaml(base_dir / "badges.yaml")

    worlds = [_parse_world(entry, "worlds.yaml") for entry in _entries(worlds_raw, "worlds", "worlds.yaml")]
    levels = [_parse_level(entry, "levels.yaml") for entry in _entries(levels_raw, "levels", "levels.yaml")]
    badges = [_parse_badge(entry, "badges.yaml") for entry in _entries(badges_raw, "badges", "badges.yaml")]

    world_ids = {w.id for w in worlds}
    for level in levels:
        if level.world_id not in world_ids:
            raise ValueError(f"levels.yaml: level {level.id!r} refers to unknown world {level.world_id!r}")

    rates = levels_raw.get("green_points_per_star") or {}
    if not isinstance(rates, dict):
        raise ValueError("levels.yaml: 'green_points_per_star' must be a mapping")
    green_points = {str(k): int(v) for k, v in rates.items()}

    return ContentRepository(levels, worlds, badges, green_points)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Content file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected a YAML mapping")
    return raw


def _entries(raw: Dict[str, Any], key: str, source: str) -> List[Dict[str, Any]]:
    entries = raw.get(key)
    if not entries or not isinstance(entries, list):
        raise ValueError(f"{source}: missing or empty '{key}' list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"{source}: every '{key}' entry must be a mapping")
    return entries


def _require(entry: Dict[str, Any], name: str, source: str) -> Any:
    value = entry.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{source}: entry {entry.get('id', '?')!r} is missing '{name}'")
    return value


def _parse_world(entry: Dict[str, Any], source: str) -> World:
    return World(
        id=str(_require(entry, "id", source)).strip(),
        order=int(_require(entry, "order", source)),
        title=str(entry.get("title", "")).strip(),
        stars_to_unlock=int(entry.get("stars_to_unlock", 0)),
    )


def _parse_level(entry: Dict[str, Any], source: str) -> Level:
    difficulty = int(entry.get("difficulty", 1))
    if difficulty not in (1, 2, 3):
        raise ValueError(f"{source}: level {entry.get('id')!r} has invalid difficulty {difficulty}")
    return Level(
        id=str(_require(entry, "id", source)).strip(),
        world_id=str(_require(entry, "world", source)).strip(),
        order=int(_require(entry, "order", source)),
        title=str(entry.get("title", "")).strip(),
        type=str(entry.get("type", "quiz")).strip(),
        difficulty=difficulty,
        stars_required=int(entry.get("stars_required", 0)),
    )


def _parse_badge(entry: Dict[str, Any], source: str) -> BadgeDefinition:
    condition = _require(entry, "condition", source)
    if not isinstance(condition, dict):
        raise ValueError(f"{source}: badge {entry.get('id')!r} condition must be a mapping")
    params = {k: v for k, v in condition.items() if k != "kind"}
    return BadgeDefinition(
        id=str(_require(entry, "id", source)).strip(),
        kind=str(_require(condition, "kind", source)).strip(),
        params=params,
        name=str(entry.get("name", "")).strip(),
        description=str(entry.get("description", "")).strip(),
    )
