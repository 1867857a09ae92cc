from __future__ import annotations

from typing import Iterable

import pytest

from matrixcipher.controller.scheduler import ManualScheduler
from matrixcipher.model.key_series import generate_key_series
from matrixcipher.model.matrix import gen_plaintext
from matrixcipher.model.rotation import default_random_source


def _sequence_source(values: Iterable[float]):
    iterator = iter(values)
    return lambda: next(iterator)


@pytest.fixture
def sequence_source():
    """Factory for random sources returning the given values in order."""
    return _sequence_source


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def series():
    return generate_key_series(8, 5, default_random_source(1234))


@pytest.fixture
def plaintext():
    return gen_plaintext(5)


@pytest.fixture
def rendered() -> list:
    return []
