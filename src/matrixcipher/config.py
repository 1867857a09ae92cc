"""
Configuration
=============
Typed configuration structures with documented defaults.

Classes:
    CipherConfig: Size of the key series and the random seed.
    PlaybackConfig: Timing of the play/rewind animation.
    LoggingConfig: Log level, log files and the per-step trace.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
import logging
from typing import Any, Dict, Optional

from matrixcipher.model.errors import InvalidParameters


@dataclass
class CipherConfig:
    # Matrix dimension (n x n), at least 2
    dimension: int = 16
    # Number of rotation steps in the key series, at least 1
    num_steps: int = 32
    # Seed for the random source; None draws fresh entropy
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.dimension < 2:
            raise InvalidParameters(f"dimension must be at least 2, got {self.dimension}.")
        if self.num_steps < 1:
            raise InvalidParameters(f"num_steps must be at least 1, got {self.num_steps}.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> CipherConfig:
        config = CipherConfig(
            dimension=int(data.get("dimension", 16)),
            num_steps=int(data.get("num_steps", 32)),
            seed=data.get("seed"),
        )
        config.validate()
        return config


@dataclass
class PlaybackConfig:
    # Delay between automatic steps while playing or rewinding
    step_delay_ms: int = 100
    # Delay before the first automatic step
    start_delay_ms: int = 0

    def validate(self) -> None:
        if self.step_delay_ms < 0 or self.start_delay_ms < 0:
            raise InvalidParameters("Playback delays must not be negative.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PlaybackConfig:
        config = PlaybackConfig(
            step_delay_ms=int(data.get("step_delay_ms", 100)),
            start_delay_ms=int(data.get("start_delay_ms", 0)),
        )
        config.validate()
        return config


@dataclass
class LoggingConfig:
    # Level for the whole 'matrixcipher' namespace
    level: int = logging.INFO
    # Optional file receiving the same output as the console
    log_file: Optional[str] = None
    # Emit one DEBUG record per playback step, regardless of `level`
    trace_steps: bool = False
    # Send the step trace to its own file instead of the shared handlers
    trace_file: Optional[str] = None
