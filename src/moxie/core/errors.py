"""Error taxonomy shared by the fitness helpers, the alias table and the
selection strategies.

All errors derive from :class:`ValueError` so callers that already guard
configuration code with ``except ValueError`` keep working.
"""

__all__ = [
    "DegenerateDistributionError",
    "EmptyInputError",
    "InvalidArgumentError",
    "SelectionError",
]


class SelectionError(ValueError):
    """Base class for every error raised by moxie."""


class InvalidArgumentError(SelectionError):
    """A size or policy parameter is out of range (e.g. ``n`` larger than the population)."""


class DegenerateDistributionError(SelectionError):
    """The fitness / probability input does not describe a usable distribution."""


class EmptyInputError(DegenerateDistributionError):
    """An empty fitness, objective or probability vector was supplied."""
