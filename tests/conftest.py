"""Shared fixtures for chunkmerge tests.

Provides the base/left/right snapshots used across test modules:
- conflicting: both sides rewrite the same base line
- disjoint: the sides edit base lines that are not adjacent
- adjacent: the sides edit neighbouring base lines
"""
from __future__ import annotations

import random

import pytest


@pytest.fixture
def conflicting() -> tuple[str, str, str]:
    """Both sides change line 1 of the base differently."""
    return (
        "alpha\nbravo\ncharlie\n",
        "alpha\nbravo-left\ncharlie\n",
        "alpha\nbravo-right\ncharlie\n",
    )


@pytest.fixture
def disjoint() -> tuple[str, str, str]:
    """Left changes the first line, right changes the last line."""
    return (
        "one\ntwo\nthree\n",
        "ONE\ntwo\nthree\n",
        "one\ntwo\nTHREE\n",
    )


@pytest.fixture
def adjacent() -> tuple[str, str, str]:
    """Left changes line 0, right changes line 1."""
    return (
        "one\ntwo\nthree\n",
        "ONE\ntwo\nthree\n",
        "one\nTWO\nthree\n",
    )


def _mutate(lines: list[str], rng: random.Random, tag: str) -> list[str]:
    """Randomly replace, delete or insert lines."""
    result = []
    for number, line in enumerate(lines):
        roll = rng.random()
        if roll < 0.15:
            result.append(f"{tag}-{number}\n")
        elif roll < 0.25:
            continue
        else:
            result.append(line)
        if rng.random() < 0.08:
            result.append(f"{tag}-extra-{number}\n")
    return result


@pytest.fixture
def random_snapshots():
    """Factory for seeded base/left/right snapshots with random line edits."""
    def make(seed: int) -> tuple[str, str, str]:
        rng = random.Random(seed)
        base = [f"line {i}\n" for i in range(rng.randint(0, 30))]
        left = _mutate(base, rng, "left")
        right = _mutate(base, rng, "right")
        return "".join(base), "".join(left), "".join(right)
    return make
