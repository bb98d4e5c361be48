"""Shared pytest fixtures for the logical file test suite."""

from __future__ import annotations

import pytest

_SOURCES = {
    "main.source": [
        "one", "two", "three", "four", "five",
        "%(include.source)",
        "six", "seven", "eight", "nine",
        "%% ok",
    ],
    "include.source": ["alpha", "beta", "delta", "gamma"],
    "commented.source": [
        "one", "two", "%% nothing here", "three", "four", "%% or here", "five", "six",
    ],
    "outer.source": ["top", "%(middle.source)", "bottom"],
    "middle.source": ["m1", "%(leaf.source)", "m3"],
    "leaf.source": ["l1", "l2"],
    "twice.source": ["head", "%(leaf.source)", "body", "%(leaf.source)", "tail"],
    "cycle_a.source": ["x", "%(cycle_b.source)", "y"],
    "cycle_b.source": ["p", "%(cycle_a.source)", "q"],
    "self.source": ["x", "%(self.source)", "y"],
    "missing.source": ["x", "%(nope.source)", "y"],
    "first_line.source": ["%(leaf.source)", "after"],
}


@pytest.fixture
def support(tmp_path):
    """A directory of sample sources; returns its path as a string."""
    for name, lines in _SOURCES.items():
        (tmp_path / name).write_text("\n".join(lines) + "\n")
    (tmp_path / "empty.source").write_text("")
    return str(tmp_path)
