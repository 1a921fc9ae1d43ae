"""
Time-driven playback over a step trace.

    IDLE ──play──▶ PLAYING ──pause──▶ PAUSED ──play──▶ PLAYING
                      │ last step reached
                      ▼
                   FINISHED

load() and reset() return to IDLE from anywhere. At most one tick is
pending per controller; pause(), reset() and load() cancel it before
returning, so a stale tick can never move current_step.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .config import DEFAULT_SPEED, SPEED_MAX, SPEED_MIN, clamp
from .scheduler import Scheduler
from .steps import COMPARE, SWAP, SortStep

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    IDLE     = "idle"
    PLAYING  = "playing"
    PAUSED   = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackState:
    steps:        Tuple[SortStep, ...]
    current_step: int
    is_playing:   bool
    speed:        int


class PlaybackController:
    """
    Walks a trace one step per tick, `speed` milliseconds apart.

    The sonifier (a SonificationMapper or anything with the same
    play_tone/play_comparison/play_swap methods) is called for every
    step visited by a tick. `on_step(index, step)` is called whenever
    current_step changes.
    """

    def __init__(self, sonifier=None, scheduler=None, speed=DEFAULT_SPEED, on_step=None):
        self.sonifier   = sonifier
        self.scheduler  = scheduler or Scheduler()
        self.on_step    = on_step
        self._speed     = int(clamp(int(speed), SPEED_MIN, SPEED_MAX))
        self._steps     = ()
        self._current   = 0
        self._status    = PlaybackStatus.IDLE
        self._timer     = None
        self._max_value = 0

    # -- read-only views --
    @property
    def steps(self):
        return self._steps

    @property
    def current_step(self):
        return self._current

    @property
    def current(self):
        return self._steps[self._current] if self._steps else None

    @property
    def is_playing(self):
        return self._status is PlaybackStatus.PLAYING

    @property
    def is_finished(self):
        return self._status is PlaybackStatus.FINISHED

    @property
    def status(self):
        return self._status

    @property
    def speed(self):
        return self._speed

    @property
    def state(self):
        return PlaybackState(self._steps, self._current, self.is_playing, self._speed)

    # -- operations --
    def load(self, steps):
        self._cancel()
        self._steps     = tuple(steps)
        self._current   = 0
        self._status    = PlaybackStatus.IDLE
        self._max_value = max(self._steps[0].array, default=0) if self._steps else 0
        logger.debug("Loaded trace of %d steps", len(self._steps))

    def play(self):
        if not self._steps or self._status in (PlaybackStatus.PLAYING, PlaybackStatus.FINISHED):
            return False
        if self._current >= len(self._steps) - 1:
            self._status = PlaybackStatus.FINISHED
            return False
        self._status = PlaybackStatus.PLAYING
        self._timer  = self.scheduler.call_later(self._speed, self._tick)
        logger.debug("Playing from step %d at %d ms/step", self._current, self._speed)
        return True

    def pause(self):
        if self._status is not PlaybackStatus.PLAYING:
            return False
        self._cancel()
        self._status = PlaybackStatus.PAUSED
        logger.debug("Paused at step %d", self._current)
        return True

    def toggle(self):
        return self.pause() if self.is_playing else self.play()

    def step(self, direction=1):
        if self.is_playing or not self._steps:
            return self._current
        if direction == 0:
            return self._current
        self._move_to(self._current + (1 if direction > 0 else -1))
        return self._current

    def seek(self, index):
        if self.is_playing or not self._steps:
            return self._current
        self._move_to(int(index))
        return self._current

    def reset(self):
        self._cancel()
        self._current = 0
        self._status  = PlaybackStatus.IDLE

    def set_speed(self, ms):
        # a pending tick keeps its deadline; the next one uses the new delay
        self._speed = int(clamp(int(ms), SPEED_MIN, SPEED_MAX))

    # -- internals --
    def _move_to(self, index):
        index = clamp(index, 0, len(self._steps) - 1)
        last  = len(self._steps) - 1
        if index == last:
            self._status = PlaybackStatus.FINISHED
        elif index == 0:
            self._status = PlaybackStatus.IDLE
        else:
            self._status = PlaybackStatus.PAUSED
        if index != self._current:
            self._current = index
            self._notify()

    def _cancel(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self):
        due, self._timer = self._timer.deadline, None
        if self._status is not PlaybackStatus.PLAYING:
            return
        self._current += 1
        # settle the next state before on_step runs; it may pause/load/reset or raise
        if self._current >= len(self._steps) - 1:
            self._status = PlaybackStatus.FINISHED
            logger.debug("Finished after %d steps", len(self._steps))
        else:
            # schedule from the previous deadline so a slow frame is caught up, not dropped
            self._timer = self.scheduler.call_at(due + self._speed, self._tick)
        self._sonify(self._steps[self._current])
        self._notify()

    def _notify(self):
        if self.on_step:
            self.on_step(self._current, self._steps[self._current])

    def _sonify(self, step):
        if self.sonifier is None or step.sorted:
            return
        vals = step.values()
        try:
            if step.type == COMPARE and len(vals) == 2:
                self.sonifier.play_comparison(vals[0], vals[1], self._max_value)
            elif step.type == COMPARE and len(vals) == 1:
                self.sonifier.play_tone(self.sonifier.value_to_frequency(vals[0], self._max_value))
            elif step.type == SWAP and len(vals) == 2:
                self.sonifier.play_swap(vals[0], vals[1], self._max_value)
        except Exception as e:
            logger.debug("Sonification failed at step %d: %s", self._current, e)
