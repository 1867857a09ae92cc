"""
Key Series
==========
Generates a series of rotation matrices whose product is the encryption key,
together with their inverses (transposes) and the products going both ways.

Multiplication order
--------------------
Steps are applied to the plaintext by left multiplication, so the newest
encryption rotation is multiplied onto the LEFT of the running product:

    encrypt_product = E[n-1] @ ... @ E[1] @ E[0]

Decryption undoes the last step first, so the newest decryption rotation is
multiplied onto the RIGHT:

    decrypt_product = D[0] @ D[1] @ ... @ D[n-1]

With this pairing ``decrypt_product @ encrypt_product == I`` and
``decrypt_product == encrypt_product.T``.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from matrixcipher.model.errors import InvalidParameters
from matrixcipher.model.matrix import Matrix
from matrixcipher.model.rotation import RandomSource, random_rotation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeySeries:
    """Read-only result of :func:`generate_key_series`."""
    encrypt_series: tuple[Matrix, ...]
    decrypt_series: tuple[Matrix, ...]
    encrypt_product: Matrix
    decrypt_product: Matrix

    def __post_init__(self) -> None:
        if not self.encrypt_series:
            raise InvalidParameters("Key series must contain at least one step.")
        if len(self.encrypt_series) != len(self.decrypt_series):
            raise InvalidParameters("Encrypt and decrypt series must have the same length.")

    @property
    def num_steps(self) -> int:
        return len(self.encrypt_series)

    @property
    def dimension(self) -> int:
        return self.encrypt_product.size

    def partial_encrypt_product(self, steps: int) -> Matrix:
        """Product of the first ``steps`` encryption rotations (identity for 0)."""
        if not 0 <= steps <= self.num_steps:
            raise IndexError(f"Step count {steps} out of range 0..{self.num_steps}.")
        if steps == self.num_steps:
            return self.encrypt_product

        product = Matrix.identity(self.dimension)
        for enc in self.encrypt_series[:steps]:
            product = enc @ product
        return product


def generate_key_series(num: int, dim: int, random: Optional[RandomSource] = None) -> KeySeries:
    """
    Generate ``num`` random ``dim``-by-``dim`` rotations and their products.

    Args:
        num: Number of steps, at least 1.
        dim: Matrix dimension, at least 2.
        random: Uniform [0, 1) sampler. Defaults to an unseeded numpy Generator.

    Raises:
        InvalidParameters: If ``num < 1`` or ``dim < 2``.
    """
    if num < 1:
        raise InvalidParameters(f"Number of steps must be at least 1, got {num}.")
    if dim < 2:
        raise InvalidParameters(f"Matrix dimension must be at least 2, got {dim}.")

    encrypt: list[Matrix] = []
    decrypt: list[Matrix] = []
    encrypt_product: Optional[Matrix] = None
    decrypt_product: Optional[Matrix] = None

    for _ in range(num):
        enc = random_rotation(dim, random)
        dec = enc.transpose()

        encrypt_product = enc if encrypt_product is None else enc @ encrypt_product
        decrypt_product = dec if decrypt_product is None else decrypt_product @ dec

        encrypt.append(enc)
        decrypt.append(dec)

    logger.debug(f"Generated key series: {num} steps of {dim}x{dim}.")
    return KeySeries(
        encrypt_series=tuple(encrypt),
        decrypt_series=tuple(decrypt),
        encrypt_product=encrypt_product,
        decrypt_product=decrypt_product,
    )
