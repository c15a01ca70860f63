"""Filling multidimensional views with reproducible pseudo-random values."""

from __future__ import annotations

import itertools
import random
from typing import Any

DEFAULT_SEED = 1234


def fill_random(span: Any, seed: int = DEFAULT_SEED) -> None:
    """Write integers drawn uniformly from 0..127 into every element of ``span``.

    Elements are visited in row-major index order, so the same seed always
    gives the same contents for the same shape, whatever the layout.
    """
    gen = random.Random(seed)
    for index in itertools.product(*(range(e) for e in span.extents)):
        span[index] = gen.randint(0, 127)