"""
Cipher Session
==============
Holds the data of one demonstration run in one place.

Why is this file needed?
------------------------
1. Ownership: The key series belongs to the session and is discarded
   whenever a new one is generated.
2. Wiring: It builds a PlaybackController from its own plaintext and
   series, so callers only supply the renderer and the timer facility.

Classes:
    CipherSession: Configuration, plaintext and current key series.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Optional

from matrixcipher.config import CipherConfig, PlaybackConfig
from matrixcipher.controller.playback import PlaybackController, PlaybackSnapshot, Renderer
from matrixcipher.controller.scheduler import Scheduler
from matrixcipher.model.errors import InvalidDimension
from matrixcipher.model.key_series import KeySeries, generate_key_series
from matrixcipher.model.matrix import Matrix, gen_plaintext
from matrixcipher.model.rotation import RandomSource, default_random_source

logger = logging.getLogger(__name__)


@dataclass
class CipherSession:
    config: CipherConfig = field(default_factory=CipherConfig)
    plaintext: Optional[Matrix] = None
    series: Optional[KeySeries] = None
    random: Optional[RandomSource] = None

    def __post_init__(self) -> None:
        self.config.validate()
        if self.random is None:
            self.random = default_random_source(self.config.seed)
        if self.plaintext is None:
            self.plaintext = gen_plaintext(self.config.dimension)
        elif self.plaintext.size != self.config.dimension:
            raise InvalidDimension(
                f"Plaintext is {self.plaintext.size}x{self.plaintext.size}, "
                f"configured dimension is {self.config.dimension}."
            )
        if self.series is None:
            self.regenerate()

    def regenerate(self) -> KeySeries:
        """Replace the key series with a freshly generated one."""
        self.series = generate_key_series(self.config.num_steps, self.config.dimension, self.random)
        logger.info(
            f"Generated key series: {self.config.num_steps} steps, "
            f"{self.config.dimension}x{self.config.dimension}."
        )
        return self.series

    def final_ciphertext(self) -> Matrix:
        return self.series.encrypt_product @ self.plaintext

    def decrypt(self, ciphertext: Matrix) -> Matrix:
        """Apply the aggregate decryption key."""
        return self.series.decrypt_product @ ciphertext

    def create_controller(
        self,
        render: Optional[Renderer] = None,
        scheduler: Optional[Scheduler] = None,
        playback: Optional[PlaybackConfig] = None,
        on_change: Optional[Callable[[PlaybackSnapshot], None]] = None,
    ) -> PlaybackController:
        return PlaybackController(
            series=self.series,
            plaintext=self.plaintext,
            render=render,
            scheduler=scheduler,
            config=playback,
            on_change=on_change,
        )

    def reset(self) -> None:
        """Back to defaults with a new plaintext and key series."""
        self.config = CipherConfig()
        self.random = default_random_source(self.config.seed)
        self.plaintext = gen_plaintext(self.config.dimension)
        self.regenerate()
        logger.info("Cipher session has been reset.")
