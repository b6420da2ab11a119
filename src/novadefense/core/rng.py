from __future__ import annotations

import random


def normalize_seed(seed: int | None) -> int | None:
    if seed is None:
        return None
    seed_val = int(seed) & 0x7FFFFFFF
    return seed_val if seed_val != 0 else 1


def make_rng(seed: int | None = None) -> random.Random:
    """Live (OS-seeded) randomness unless a seed is given."""
    return random.Random(normalize_seed(seed))
