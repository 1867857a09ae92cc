"""
Matrix Cipher Demonstrator
==========================
A toy "matrix cipher": a plaintext square matrix is rotated step by step by a
series of random planar rotations. Each step can be undone with the
transpose of its rotation, so the whole process can be played forwards
(encryption) and backwards (decryption).
"""
from matrixcipher.model.errors import MatrixCipherError, InvalidDimension, InvalidAxis, InvalidParameters
from matrixcipher.model.matrix import Matrix
from matrixcipher.model.rotation import rotation, random_rotation
from matrixcipher.model.key_series import KeySeries, generate_key_series
from matrixcipher.controller.engine import apply_forward, apply_backward
from matrixcipher.controller.playback import PlaybackController, PlaybackDirection

__all__ = [
    "MatrixCipherError",
    "InvalidDimension",
    "InvalidAxis",
    "InvalidParameters",
    "Matrix",
    "rotation",
    "random_rotation",
    "KeySeries",
    "generate_key_series",
    "apply_forward",
    "apply_backward",
    "PlaybackController",
    "PlaybackDirection",
]
