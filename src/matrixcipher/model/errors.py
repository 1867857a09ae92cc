"""
Error Taxonomy
==============
All errors are raised synchronously while building matrices or key series,
never during playback.
"""


class MatrixCipherError(ValueError):
    """Base class for invalid cipher inputs."""


class InvalidDimension(MatrixCipherError):
    """Matrix is not square, or is too small for a rotation."""


class InvalidAxis(MatrixCipherError):
    """Rotation axes are equal or out of range."""


class InvalidParameters(MatrixCipherError):
    """Key series or configuration parameters are out of range."""
