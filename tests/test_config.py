from pathlib import Path

import pytest

from pulka.config import (
    DESKTOP_SCHEDULE, MOBILE_SCHEDULE, ConfigError, GameConfig, LevelSchedule,
    load_config,
)

SAMPLE_CONFIG = Path(__file__).resolve().parent.parent / 'config' / 'pulka.yaml'


def write(tmp_path, text):
    path = tmp_path / 'pulka.yaml'
    path.write_text(text, encoding='utf-8')
    return path


def test_defaults():
    config = load_config()
    assert config.player.width == pytest.approx(20.8)
    assert config.player.height == pytest.approx(36)
    assert config.schedule.intervals_ms == DESKTOP_SCHEDULE
    assert config.schedule.level_count == 5
    assert not config.mobile


def test_mobile_schedule_only_changes_first_level():
    config = load_config(mobile=True)
    assert config.schedule.intervals_ms == MOBILE_SCHEDULE
    assert config.schedule.interval_for(1) == 500
    assert config.schedule.intervals_ms[1:] == DESKTOP_SCHEDULE[1:]


def test_interval_for_rejects_out_of_range_levels():
    schedule = LevelSchedule()
    assert schedule.interval_for(5) == 230
    with pytest.raises(ValueError):
        schedule.interval_for(0)
    with pytest.raises(ValueError):
        schedule.interval_for(6)


def test_sample_config_matches_defaults():
    assert load_config(SAMPLE_CONFIG) == GameConfig()


def test_partial_override(tmp_path):
    path = write(tmp_path, 'projectile:\n  speed: 8\nlevels:\n  desktop: [900, 600, 300]\n')
    config = load_config(path)
    assert config.projectile.speed == 8
    assert config.projectile.width == 20
    assert config.schedule.level_count == 3
    assert config.mobile_schedule.intervals_ms == MOBILE_SCHEDULE


def test_input_section_and_explicit_flag(tmp_path):
    path = write(tmp_path, 'input:\n  mobile: true\n')
    assert load_config(path).mobile
    assert not load_config(path, mobile=False).mobile


def test_empty_file_keeps_defaults(tmp_path):
    assert load_config(write(tmp_path, '')) == GameConfig()


@pytest.mark.parametrize('text, message', [
    ('physics: {}\n', 'unknown section "physics"'),
    ('player:\n  colour: red\n', 'unknown key "player.colour"'),
    ('player:\n  speed: fast\n', '"player.speed" must be a number'),
    ('goal:\n  width: 0\n', '"goal.width" must be positive'),
    ('levels:\n  desktop: []\n', '"levels.desktop" must be a non-empty list'),
    ('levels:\n  desktop: [100, -5]\n', 'positive integers'),
    ('levels:\n  tablet: [100]\n', 'unknown key "levels.tablet"'),
    ('input:\n  mobile: 1\n', '"input.mobile" must be true or false'),
    ('- just\n- a list\n', 'top level must be a mapping'),
])
def test_invalid_values(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        load_config(write(tmp_path, text))


def test_negative_start_position_is_allowed(tmp_path):
    config = load_config(write(tmp_path, 'player:\n  start_x: -5\n'))
    assert config.player.start_x == -5


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / 'nope.yaml')


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigError, match='invalid YAML'):
        load_config(write(tmp_path, 'player: [unclosed\n'))
