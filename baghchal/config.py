from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

import yaml

from baghchal.core.rules import undo_limit, win_capture_count
from baghchal.core.state import Cell, Difficulty, GameMode

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class ConfigError(ValueError):
    pass


def parse_enum(enum_type: Type[E], value: Union[str, E]) -> E:
    """Accept an enum member, its value or its (case-insensitive) name."""
    if isinstance(value, enum_type):
        return value
    text = str(value).strip()
    for member in enum_type:
        if text.upper() == member.name or text.lower() == str(member.value).lower():
            return member
    choices = ", ".join(member.name.lower() for member in enum_type)
    raise ConfigError(f"Unknown {enum_type.__name__} {value!r}; expected one of: {choices}")


@dataclass
class EvaluationWeights:
    capture: float = 1000.0
    trapped_tiger: float = -500.0
    mobility: float = 10.0
    capture_mobility: int = 2
    jitter: float = 5.0


@dataclass
class SearchConfig:
    depths: Dict[Difficulty, int] = field(
        default_factory=lambda: {Difficulty.EASY: 0, Difficulty.MEDIUM: 2, Difficulty.HARD: 4}
    )
    win_score: float = 10000.0
    # Fixed in-tree Tiger win cutoff; not tied to MatchConfig.capture_goal.
    capture_cutoff: int = 5
    prune: bool = True

    def depth_for(self, difficulty: Difficulty) -> int:
        return self.depths[difficulty]


@dataclass
class MatchConfig:
    mode: GameMode = GameMode.AI
    side: Cell = Cell.GOAT  # the human's side in AI mode
    difficulty: Difficulty = Difficulty.MEDIUM
    undo_modes: Tuple[GameMode, ...] = (GameMode.PVP,)
    think_delay: float = 0.8  # seconds a front end waits before asking the AI

    def __post_init__(self) -> None:
        if self.side not in (Cell.TIGER, Cell.GOAT):
            raise ConfigError("side must be TIGER or GOAT.")

    @property
    def ai_side(self) -> Optional[Cell]:
        if self.mode == GameMode.PVP:
            return None
        return self.side.opponent

    @property
    def capture_goal(self) -> int:
        return win_capture_count(self.difficulty, self.side, self.mode)

    @property
    def undo_limit(self) -> int:
        return undo_limit(self.difficulty)

    @property
    def undo_enabled(self) -> bool:
        return self.mode in self.undo_modes


@dataclass
class AppConfig:
    match: MatchConfig = field(default_factory=MatchConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    evaluation: EvaluationWeights = field(default_factory=EvaluationWeights)


def _known_keys(section: str, raw: Mapping[str, Any], cls: type) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - names)
    if unknown:
        raise ConfigError(f"Unknown keys in [{section}]: {', '.join(unknown)}")
    return dict(raw)


def match_config_from_dict(raw: Mapping[str, Any]) -> MatchConfig:
    values = _known_keys("match", raw, MatchConfig)
    if "mode" in values:
        values["mode"] = parse_enum(GameMode, values["mode"])
    if "side" in values:
        values["side"] = parse_enum(Cell, values["side"])
    if "difficulty" in values:
        values["difficulty"] = parse_enum(Difficulty, values["difficulty"])
    if "undo_modes" in values:
        values["undo_modes"] = tuple(parse_enum(GameMode, mode) for mode in values["undo_modes"] or ())
    return MatchConfig(**values)


def search_config_from_dict(raw: Mapping[str, Any]) -> SearchConfig:
    values = _known_keys("search", raw, SearchConfig)
    if "depths" in values:
        depths = SearchConfig().depths
        for name, depth in (values["depths"] or {}).items():
            depths[parse_enum(Difficulty, name)] = int(depth)
        values["depths"] = depths
    return SearchConfig(**values)


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load an :class:`AppConfig` from a YAML file; missing sections keep defaults."""
    if path is None:
        return AppConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise ConfigError(f"Config file {cfg_path} does not exist.")
    raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a mapping.")
    _known_keys("root", raw, AppConfig)

    config = AppConfig(
        match=match_config_from_dict(raw.get("match") or {}),
        search=search_config_from_dict(raw.get("search") or {}),
        evaluation=EvaluationWeights(**_known_keys("evaluation", raw.get("evaluation") or {}, EvaluationWeights)),
    )
    logger.debug("Loaded config from %s: %s", cfg_path, config)
    return config
