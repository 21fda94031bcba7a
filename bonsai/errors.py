"""Exceptions raised by the growth engine."""

from __future__ import annotations


class BonsaiError(Exception):
    pass


class InvalidInput(BonsaiError, ValueError):
    """A precondition was violated (bad seed, malformed state, unknown format)."""


class GrowthFinished(InvalidInput):
    """The tree has no active tips left and cannot be watered again."""
