# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Exception hierarchy for rule parsing, surface lookup and tracking.

Construction errors (parse, registry misuse) abort a model build.
Query errors (no exit, no neighbour, ambiguous neighbour, bad start) are
raised per call and left to the caller to skip, log or abort.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence, Tuple


class CSGError(Exception):
    """Base class for all csgtrack errors."""


class RuleParseError(CSGError, ValueError):
    """Malformed rule expression.

    Attributes:
        position: Character offset of the offending token.
        token: The offending token text ('' at end of input).
        expression: The full expression being parsed.
    """

    def __init__(self, message: str, position: int, token: str,
                 expression: str = ""):
        super().__init__(f"{message} at position {position}: {token!r}")
        self.position = position
        self.token = token
        self.expression = expression


class UnknownSurfaceError(CSGError, KeyError):
    """Surface id is not bound in the registry."""

    def __init__(self, surface_id: int):
        super().__init__(surface_id)
        self.surface_id = surface_id

    def __str__(self) -> str:
        return f"Surface {self.surface_id} not registered"


class DuplicateSurfaceError(CSGError, ValueError):
    """Surface id is already bound in the registry."""

    def __init__(self, surface_id: int):
        super().__init__(f"Surface {surface_id} already registered")
        self.surface_id = surface_id


class NoExitError(CSGError):
    """No bounding surface of a rule is crossed within the distance limit."""


class NoNeighborError(CSGError):
    """No cell lies across a surface: the ray left the modelled region."""

    def __init__(self, surface_id: int, point: Tuple[float, float, float]):
        super().__init__(f"No cell found across surface {surface_id} at {point}")
        self.surface_id = surface_id
        self.point = point


class AmbiguousNeighborError(CSGError):
    """More than one cell lies across a surface (overlapping cells)."""

    def __init__(self, surface_id: int, point: Tuple[float, float, float],
                 candidates: Sequence[Any]):
        ids = [getattr(c, 'id', c) for c in candidates]
        super().__init__(
            f"Cells {ids} all lie across surface {surface_id} at {point}")
        self.surface_id = surface_id
        self.point = point
        self.candidates = list(candidates)


class StartNotInAnyCellError(CSGError):
    """Track start point is in no cell, or in more than one."""

    def __init__(self, point: Tuple[float, float, float],
                 candidates: Optional[Sequence[Any]] = None):
        self.point = point
        self.candidates = list(candidates or [])
        if self.candidates:
            ids = [getattr(c, 'id', c) for c in self.candidates]
            msg = f"Start point {point} lies in several cells: {ids}"
        else:
            msg = f"Start point {point} is not in any cell"
        super().__init__(msg)


class IncompleteTrackError(CSGError):
    """Tracking stopped before the end point.

    Attributes:
        segments: The segments recorded before the failure.
    """

    def __init__(self, message: str, segments: List[Any]):
        super().__init__(message)
        self.segments = list(segments)
