"""
moxie.operators
===============

Public selection operators. See :mod:`moxie.operators.selection`.
"""

from moxie.operators.selection import (
    ProportionalSelection,
    SelectionStrategy,
    TournamentSelection,
    TruncationSelection,
    UniformSelection,
    proportional_selection,
    select_members,
    tournament_selection,
    truncate,
    universal_sampling,
)

__all__ = [
    "ProportionalSelection",
    "SelectionStrategy",
    "TournamentSelection",
    "TruncationSelection",
    "UniformSelection",
    "proportional_selection",
    "select_members",
    "tournament_selection",
    "truncate",
    "universal_sampling",
]
