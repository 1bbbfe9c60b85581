"""Random integer sequences for the sorting view."""

import random
from typing import List, Optional

MIN_VALUE = 1
MAX_VALUE = 100


def generate_random_array(size: int, seed: Optional[int] = None) -> List[int]:
    """`size` integers drawn uniformly from [1, 100]."""
    rng = random.Random(seed)
    return [rng.randint(MIN_VALUE, MAX_VALUE) for _ in range(size)]
