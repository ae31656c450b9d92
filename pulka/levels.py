"""
Level Controller
=================
Level progression state machine:

    AWAITING_START -> RUNNING -> WON  -> AWAITING_START (next level)
                              |       -> COMPLETE       (after last level)
                              -> LOST

LOST and COMPLETE hold until restart_game().
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import random

from .components import Playfield
from .config import GameConfig
from .input import DirectionalIntent
from .simulation import Outcome, SimulationContext, step

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class LevelPhase(Enum):
    AWAITING_START = 'awaiting_start'
    RUNNING = 'running'
    WON = 'won'
    LOST = 'lost'
    COMPLETE = 'complete'


@dataclass(frozen=True)
class LevelState:
    """Read-only snapshot of the controller for renderers and tests."""
    level_index: int
    spawn_interval_ms: int
    phase: LevelPhase

    @property
    def won(self) -> bool:
        return self.phase in (LevelPhase.WON, LevelPhase.COMPLETE)

    @property
    def lost(self) -> bool:
        return self.phase == LevelPhase.LOST

    @property
    def awaiting_start(self) -> bool:
        return self.phase == LevelPhase.AWAITING_START

    @property
    def complete(self) -> bool:
        return self.phase == LevelPhase.COMPLETE


# (old_phase, new_phase, state after the transition)
TransitionListener = Callable[[LevelPhase, LevelPhase, LevelState], None]


class LevelController:
    """Owns the simulation context and drives it between levels."""

    def __init__(self, config: GameConfig, playfield: Optional[Playfield] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.schedule = config.schedule
        self.level_index = 1
        self.phase = LevelPhase.AWAITING_START
        self.level_started_ms = 0.0
        self._listeners: List[TransitionListener] = []

        self.context = SimulationContext(
            config,
            playfield if playfield is not None else Playfield(),
            self.schedule.interval_for(1),
            rng if rng is not None else random.Random(),
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def level_count(self) -> int:
        return self.schedule.level_count

    @property
    def spawn_interval_ms(self) -> int:
        return self.context.spawn_interval_ms

    @property
    def state(self) -> LevelState:
        return LevelState(self.level_index, self.spawn_interval_ms, self.phase)

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a callback fired on every phase change."""
        self._listeners.append(listener)

    def _set_phase(self, phase: LevelPhase) -> None:
        old = self.phase
        self.phase = phase
        if old is phase:
            return
        state = self.state
        for listener in self._listeners:
            listener(old, phase, state)

    # -------------------------------------------------------------------------
    # Lifecycle actions
    # -------------------------------------------------------------------------

    def start_level(self, now_ms: float) -> LevelState:
        """Begin the current level. Ignored unless a level is waiting to start."""
        if self.phase != LevelPhase.AWAITING_START:
            return self.state
        self.level_started_ms = now_ms
        self.context.reset()
        logger.info('Level %d started (spawn interval %d ms)',
                    self.level_index, self.spawn_interval_ms)
        self._set_phase(LevelPhase.RUNNING)
        return self.state

    def restart_game(self) -> LevelState:
        """Back to level 1 from any phase."""
        logger.info('Game restarted from level %d (%s)',
                    self.level_index, self.phase.value)
        self.level_index = 1
        self.context.spawn_interval_ms = self.schedule.interval_for(1)
        self.context.reset()
        self._set_phase(LevelPhase.AWAITING_START)
        return self.state

    # -------------------------------------------------------------------------
    # Frame update
    # -------------------------------------------------------------------------

    def tick(self, intent: DirectionalIntent, now_ms: float) -> Outcome:
        """Run one simulation step if a level is in progress."""
        if self.phase != LevelPhase.RUNNING:
            return Outcome.CONTINUE

        outcome = step(self.context, intent, now_ms - self.level_started_ms)

        if outcome is Outcome.WON:
            self._on_won()
        elif outcome is Outcome.LOST:
            logger.info('Level %d lost', self.level_index)
            self._set_phase(LevelPhase.LOST)
        return outcome

    def _on_won(self) -> None:
        logger.info('Level %d cleared', self.level_index)
        self._set_phase(LevelPhase.WON)
        self.level_index += 1

        if self.level_index > self.level_count:
            logger.info('All %d levels cleared', self.level_count)
            self._set_phase(LevelPhase.COMPLETE)
            return

        self.context.spawn_interval_ms = self.schedule.interval_for(self.level_index)
        self.context.reset()
        self._set_phase(LevelPhase.AWAITING_START)
