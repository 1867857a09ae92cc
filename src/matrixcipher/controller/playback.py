"""
Playback Controller
===================
State machine that walks a plaintext through a key series one step at a time.

Positions
---------
The controller counts how many encryption steps have been applied to the
plaintext (``applied_steps``, 0..N). The public step index is derived from it:

    applied_steps == 0      -> current_step == -1 (AtStart, plaintext)
    0 < applied_steps < N   -> current_step == applied_steps - 1
                               (index of the most recently applied step)
    applied_steps == N      -> current_step == N  (AtEnd, full ciphertext)

so N calls to ``next`` walk from AtStart to AtEnd and N calls to ``prev``
walk back.

Scheduling
----------
At most one timer is pending at a time. Every operation that mutates the
position cancels it first, and a callback that fires after being cancelled
is ignored.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
import threading
from typing import Any, Callable, Optional

from matrixcipher.config import PlaybackConfig
from matrixcipher.controller.engine import apply_forward, apply_backward
from matrixcipher.controller.scheduler import Scheduler, QtScheduler
from matrixcipher.model.errors import InvalidDimension
from matrixcipher.model.key_series import KeySeries
from matrixcipher.model.matrix import Matrix

logger = logging.getLogger(__name__)

Renderer = Callable[[Matrix], None]


class PlaybackDirection(StrEnum):
    IDLE = "idle"
    PLAYING = "playing"
    REWINDING = "rewinding"


@dataclass
class PlaybackState:
    """Mutable playback state. Owned by exactly one PlaybackController."""
    num_steps: int
    ciphertext: Matrix
    applied_steps: int = 0
    direction: PlaybackDirection = PlaybackDirection.IDLE
    pending: Any = None

    @property
    def current_step(self) -> int:
        if self.applied_steps == 0:
            return -1
        if self.applied_steps == self.num_steps:
            return self.num_steps
        return self.applied_steps - 1


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Read-only view handed to inspection hooks."""
    current_step: int
    applied_steps: int
    num_steps: int
    direction: PlaybackDirection
    ciphertext: Matrix


class PlaybackController:
    """
    Bidirectional step/playback engine.

    Args:
        series: Key series to walk through.
        plaintext: Starting matrix; must match the series dimension.
        render: Called with the current ciphertext after every state change.
        scheduler: Timer facility. Defaults to a QtScheduler.
        config: Animation delays.
        on_change: Optional inspection hook receiving a PlaybackSnapshot
            after every state change.
    """

    def __init__(
        self,
        series: KeySeries,
        plaintext: Matrix,
        render: Optional[Renderer] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[PlaybackConfig] = None,
        on_change: Optional[Callable[[PlaybackSnapshot], None]] = None,
    ) -> None:
        self.config = config or PlaybackConfig()
        self.config.validate()
        self.scheduler = scheduler if scheduler is not None else QtScheduler()
        self._render_fn = render
        self._on_change = on_change

        self._lock = threading.RLock()
        # Bumped on every cancellation so late timer callbacks can be detected
        self._generation = 0

        self._set_session(series, plaintext)
        self._render()

    def _set_session(self, series: KeySeries, plaintext: Matrix) -> None:
        if plaintext.size != series.dimension:
            raise InvalidDimension(
                f"Plaintext is {plaintext.size}x{plaintext.size} but the key series is "
                f"{series.dimension}x{series.dimension}."
            )
        self._series = series
        self._plaintext = plaintext
        self._final_ciphertext = series.encrypt_product @ plaintext
        self._state = PlaybackState(num_steps=series.num_steps, ciphertext=plaintext)

    # --- Queries ---

    @property
    def series(self) -> KeySeries:
        return self._series

    @property
    def plaintext(self) -> Matrix:
        return self._plaintext

    @property
    def num_steps(self) -> int:
        return self._state.num_steps

    @property
    def current_step(self) -> int:
        return self._state.current_step

    @property
    def applied_steps(self) -> int:
        return self._state.applied_steps

    @property
    def direction(self) -> PlaybackDirection:
        return self._state.direction

    def is_playing(self) -> bool:
        return self._state.direction == PlaybackDirection.PLAYING

    def is_rewinding(self) -> bool:
        return self._state.direction == PlaybackDirection.REWINDING

    def is_animating(self) -> bool:
        return self._state.direction != PlaybackDirection.IDLE

    def is_at_start(self) -> bool:
        return self._state.applied_steps == 0

    def is_at_end(self) -> bool:
        return self._state.applied_steps == self._state.num_steps

    def current_matrix(self) -> Matrix:
        return self._state.ciphertext

    def snapshot(self) -> PlaybackSnapshot:
        with self._lock:
            return PlaybackSnapshot(
                current_step=self._state.current_step,
                applied_steps=self._state.applied_steps,
                num_steps=self._state.num_steps,
                direction=self._state.direction,
                ciphertext=self._state.ciphertext,
            )

    # --- Manual stepping ---

    def next(self) -> None:
        """Apply one encryption step. No-op at the end."""
        with self._lock:
            if self.is_at_end():
                logger.debug("next(): already at end, ignoring.")
                return
            self._halt()
            self._step_forward()
            self._render()

    def prev(self) -> None:
        """Undo one encryption step. No-op at the start."""
        with self._lock:
            if self.is_at_start():
                logger.debug("prev(): already at start, ignoring.")
                return
            self._halt()
            self._step_backward()
            self._render()

    def goto_start(self) -> None:
        with self._lock:
            self._halt()
            self._state.ciphertext = self._plaintext
            self._state.applied_steps = 0
            self._render()

    def goto_end(self) -> None:
        with self._lock:
            self._halt()
            self._state.ciphertext = self._final_ciphertext
            self._state.applied_steps = self._state.num_steps
            self._render()

    def seek(self, applied_steps: int) -> None:
        """
        Scrub to the position where ``applied_steps`` steps have been applied.

        Out-of-range values are clamped to the endpoints.
        """
        with self._lock:
            target = max(0, min(applied_steps, self._state.num_steps))
            self._halt()
            if target == 0:
                ciphertext = self._plaintext
            elif target == self._state.num_steps:
                ciphertext = self._final_ciphertext
            else:
                ciphertext = self._series.partial_encrypt_product(target) @ self._plaintext
            self._state.ciphertext = ciphertext
            self._state.applied_steps = target
            self._render()

    def load(self, series: KeySeries, plaintext: Matrix) -> None:
        """Start a new session: discard the current state and return to the start."""
        with self._lock:
            self._halt()
            self._set_session(series, plaintext)
            logger.debug(f"Loaded new key series with {series.num_steps} steps.")
            self._render()

    # --- Animation ---

    def play(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._state.direction = PlaybackDirection.PLAYING
            self._schedule(self.config.start_delay_ms)

    def rewind(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._state.direction = PlaybackDirection.REWINDING
            self._schedule(self.config.start_delay_ms)

    def pause(self) -> None:
        with self._lock:
            self._halt()

    def toggle_play(self) -> None:
        with self._lock:
            if self.is_playing():
                self.pause()
            else:
                self.play()

    def toggle_rewind(self) -> None:
        with self._lock:
            if self.is_rewinding():
                self.pause()
            else:
                self.rewind()

    # --- Internals ---

    def _step_forward(self) -> None:
        state = self._state
        state.ciphertext = apply_forward(self._series, state.applied_steps, state.ciphertext)
        state.applied_steps += 1

    def _step_backward(self) -> None:
        state = self._state
        state.ciphertext = apply_backward(self._series, state.applied_steps - 1, state.ciphertext)
        state.applied_steps -= 1

    def _halt(self) -> None:
        self._cancel_pending()
        self._state.direction = PlaybackDirection.IDLE

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._state.pending is not None:
            self.scheduler.cancel(self._state.pending)
            self._state.pending = None

    def _schedule(self, delay_ms: int) -> None:
        generation = self._generation
        self._state.pending = self.scheduler.schedule_after(delay_ms, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # Cancelled after the timer had already fired
                return
            self._state.pending = None
            direction = self._state.direction

            if direction == PlaybackDirection.PLAYING and not self.is_at_end():
                self._step_forward()
                self._render()
                finished = self.is_at_end()
            elif direction == PlaybackDirection.REWINDING and not self.is_at_start():
                self._step_backward()
                self._render()
                finished = self.is_at_start()
            else:
                finished = True

            if finished:
                logger.debug(f"Animation finished at step {self._state.current_step}.")
                self._state.direction = PlaybackDirection.IDLE
            elif self._state.direction == direction and generation == self._generation:
                self._schedule(self.config.step_delay_ms)

    def _render(self) -> None:
        logger.debug(f"Step {self._state.current_step}/{self._state.num_steps} ({self._state.direction}).")
        if self._render_fn is not None:
            self._render_fn(self._state.ciphertext)
        if self._on_change is not None:
            self._on_change(self.snapshot())
