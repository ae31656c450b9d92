"""
Game Configuration
===================
Tuning constants, level schedules, and the optional YAML override file.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


# =============================================================================
# CONSTANTS
# =============================================================================

# Player sprite: source image size scaled down to playfield pixels
PLAYER_SOURCE_WIDTH = 520
PLAYER_SOURCE_HEIGHT = 900
PLAYER_SCALE = 1 / 25
PLAYER_SPEED = 5.0
PLAYER_START = (50.0, 50.0)

PROJECTILE_WIDTH = 20.0
PROJECTILE_HEIGHT = 5.0
PROJECTILE_SPEED = 5.0
PROJECTILE_SPAWN_OFFSET = 100.0  # Spawn x = playfield width - offset
PROJECTILE_DESPAWN_X = -10.0

GOAL_WIDTH = 100.0
GOAL_HEIGHT = 95.0

# Spawn interval (ms) per level, index 0 = level 1
DESKTOP_SCHEDULE = (1000, 500, 300, 250, 230)
MOBILE_SCHEDULE = (500, 500, 300, 250, 230)


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""
    pass


# =============================================================================
# CONFIG SECTIONS
# =============================================================================

@dataclass(frozen=True)
class PlayerConfig:
    source_width: float = PLAYER_SOURCE_WIDTH
    source_height: float = PLAYER_SOURCE_HEIGHT
    scale: float = PLAYER_SCALE
    speed: float = PLAYER_SPEED
    start_x: float = PLAYER_START[0]
    start_y: float = PLAYER_START[1]

    @property
    def width(self) -> float:
        return self.source_width * self.scale

    @property
    def height(self) -> float:
        return self.source_height * self.scale


@dataclass(frozen=True)
class ProjectileConfig:
    width: float = PROJECTILE_WIDTH
    height: float = PROJECTILE_HEIGHT
    speed: float = PROJECTILE_SPEED
    spawn_offset: float = PROJECTILE_SPAWN_OFFSET
    despawn_x: float = PROJECTILE_DESPAWN_X


@dataclass(frozen=True)
class GoalConfig:
    width: float = GOAL_WIDTH
    height: float = GOAL_HEIGHT


@dataclass(frozen=True)
class LevelSchedule:
    """Spawn interval for each level. The level count is its length."""
    intervals_ms: Tuple[int, ...] = DESKTOP_SCHEDULE

    @property
    def level_count(self) -> int:
        return len(self.intervals_ms)

    def interval_for(self, level_index: int) -> int:
        """Spawn interval for a 1-based level index."""
        if not 1 <= level_index <= self.level_count:
            raise ValueError(
                f'level {level_index} outside 1..{self.level_count}'
            )
        return self.intervals_ms[level_index - 1]


@dataclass(frozen=True)
class GameConfig:
    """Complete set of tuning values for one game session."""
    player: PlayerConfig = field(default_factory=PlayerConfig)
    projectile: ProjectileConfig = field(default_factory=ProjectileConfig)
    goal: GoalConfig = field(default_factory=GoalConfig)
    desktop_schedule: LevelSchedule = field(default_factory=LevelSchedule)
    mobile_schedule: LevelSchedule = field(
        default_factory=lambda: LevelSchedule(MOBILE_SCHEDULE)
    )
    mobile: bool = False

    @property
    def schedule(self) -> LevelSchedule:
        """Schedule for the active input source."""
        return self.mobile_schedule if self.mobile else self.desktop_schedule


# =============================================================================
# YAML LOADING
# =============================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_section(section_cls, data: Any, name: str, source: Path):
    """Build a frozen section dataclass from a YAML mapping."""
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ConfigError(f'{source}: "{name}" must be a mapping')

    known = {f.name for f in fields(section_cls)}
    values: Dict[str, float] = {}
    for key, value in data.items():
        if key not in known:
            raise ConfigError(f'{source}: unknown key "{name}.{key}"')
        if not _is_number(value):
            raise ConfigError(f'{source}: "{name}.{key}" must be a number')
        values[key] = value

    section = section_cls(**values)
    for f in fields(section_cls):
        # Everything except positions and offsets must be positive
        if f.name in ('start_x', 'start_y', 'despawn_x', 'spawn_offset'):
            continue
        if getattr(section, f.name) <= 0:
            raise ConfigError(f'{source}: "{name}.{f.name}" must be positive')
    return section


def _parse_schedule(data: Any, name: str, source: Path) -> LevelSchedule:
    if not isinstance(data, list) or not data:
        raise ConfigError(f'{source}: "levels.{name}" must be a non-empty list')
    for interval in data:
        if not isinstance(interval, int) or isinstance(interval, bool) or interval <= 0:
            raise ConfigError(
                f'{source}: "levels.{name}" entries must be positive integers (ms)'
            )
    return LevelSchedule(tuple(data))


def load_config(path: Union[str, Path, None] = None, mobile: Optional[bool] = None) -> GameConfig:
    """
    Load a GameConfig, optionally overridden by a YAML file.

    Missing sections keep their defaults. An explicit ``mobile`` argument
    wins over the ``input.mobile`` value in the file.
    """
    config = GameConfig()

    if path is not None:
        source = Path(path)
        try:
            with open(source, encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f'{source}: {e.strerror}') from e
        except yaml.YAMLError as e:
            raise ConfigError(f'{source}: invalid YAML ({e})') from e

        config = _apply_yaml(config, data, source)
        logger.info('Loaded configuration from %s', source)

    if mobile is not None:
        config = replace(config, mobile=mobile)
    return config


def _apply_yaml(config: GameConfig, data: Any, source: Path) -> GameConfig:
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f'{source}: top level must be a mapping')

    allowed = {'player', 'projectile', 'goal', 'levels', 'input'}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f'{source}: unknown section "{unknown[0]}"')

    changes: Dict[str, Any] = {}
    if 'player' in data:
        changes['player'] = _parse_section(PlayerConfig, data['player'], 'player', source)
    if 'projectile' in data:
        changes['projectile'] = _parse_section(
            ProjectileConfig, data['projectile'], 'projectile', source
        )
    if 'goal' in data:
        changes['goal'] = _parse_section(GoalConfig, data['goal'], 'goal', source)

    levels = data.get('levels')
    if levels is not None:
        if not isinstance(levels, dict):
            raise ConfigError(f'{source}: "levels" must be a mapping')
        extra: List[str] = sorted(set(levels) - {'desktop', 'mobile'})
        if extra:
            raise ConfigError(f'{source}: unknown key "levels.{extra[0]}"')
        if 'desktop' in levels:
            changes['desktop_schedule'] = _parse_schedule(levels['desktop'], 'desktop', source)
        if 'mobile' in levels:
            changes['mobile_schedule'] = _parse_schedule(levels['mobile'], 'mobile', source)

    input_section = data.get('input')
    if input_section is not None:
        if not isinstance(input_section, dict) or set(input_section) - {'mobile'}:
            raise ConfigError(f'{source}: "input" only supports the "mobile" key')
        if not isinstance(input_section.get('mobile', False), bool):
            raise ConfigError(f'{source}: "input.mobile" must be true or false')
        changes['mobile'] = input_section.get('mobile', False)

    return replace(config, **changes)
