# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Line tracking: the ordered cells and path lengths along a segment.

Example:
    track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(model)
    for seg in track:
        print(f"{seg.cell_id}: {seg.length} cm")
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING, Any, Iterator, List, Set, Tuple, Union
)
import logging
import math

from .errors import (
    AmbiguousNeighborError, IncompleteTrackError, NoExitError,
    NoNeighborError, StartNotInAnyCellError
)

if TYPE_CHECKING:
    from .cells import Cell
    from .model import Model

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]


class TrackState(Enum):
    TRACKING = "tracking"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class TrackSegment:
    """Part of a line track inside one cell.

    Attributes:
        cell: The cell traversed.
        surface_in: Signed surface crossed to enter the cell (0 at the start).
        surface_out: Signed surface crossed to leave it (0 at the end).
        t_enter: Entry distance from the track start.
        t_exit: Exit distance from the track start.
    """
    cell: 'Cell'
    surface_in: int
    surface_out: int
    t_enter: float
    t_exit: float

    @property
    def cell_id(self) -> int:
        return self.cell.id

    @property
    def material(self) -> Any:
        return self.cell.material

    @property
    def length(self) -> float:
        """Length of this segment."""
        return self.t_exit - self.t_enter

    def __repr__(self) -> str:
        return (f"TrackSegment(cell={self.cell.id}, material={self.material!r}, "
                f"length={self.length:.4f})")


class LineTrack:
    """Track of a straight segment through a model.

    Each instance holds its own state, so separate tracks can be
    calculated concurrently on a frozen model.

    Attributes:
        start: Track start point.
        end: Track end point.
        direction: Unit vector from start to end.
        total_distance: Distance from start to end.
    """

    def __init__(self, start: Point, end: Point):
        self.start: Point = tuple(float(v) for v in start)
        self.end: Point = tuple(float(v) for v in end)
        delta = [e - s for s, e in zip(self.start, self.end)]
        dist = math.sqrt(sum(v * v for v in delta))
        if dist == 0.0:
            raise ValueError("Track start and end coincide")
        self.direction: Point = tuple(v / dist for v in delta)
        self.total_distance = dist
        self._segments: List[TrackSegment] = []
        self._state = TrackState.TRACKING

    @classmethod
    def from_direction(cls, start: Point, direction: Point,
                       distance: float) -> 'LineTrack':
        """Track of the given length from start along direction.

        Raises:
            ValueError: If direction has zero length or distance is not positive.
        """
        norm = math.sqrt(sum(v * v for v in direction))
        if norm == 0.0:
            raise ValueError("Direction has zero length")
        if distance <= 0:
            raise ValueError("Track distance must be positive")
        end = tuple(s + distance * v / norm for s, v in zip(start, direction))
        return cls(start, end)

    @property
    def state(self) -> TrackState:
        return self._state

    def _point_at(self, t: float) -> Point:
        sx, sy, sz = self.start
        ux, uy, uz = self.direction
        return (sx + t * ux, sy + t * uy, sz + t * uz)

    def _start_cell(self, model: 'Model') -> 'Cell':
        candidates = model.cells_at(self.start)
        if len(candidates) != 1:
            raise StartNotInAnyCellError(self.start, candidates)
        return candidates[0]

    def calculate(self, model: 'Model') -> 'LineTrack':
        """Walk the track through model, cell by cell.

        Returns:
            self, with segments filled and state COMPLETE.

        Raises:
            StartNotInAnyCellError: Start is in no cell or in several.
            IncompleteTrackError: No cell across a crossed surface, or the
                step limit was reached. The partial segments are attached.
            AmbiguousNeighborError: Several cells across a crossed surface.
        """
        config = model.registry.config
        surface_map = model.surface_map
        self._segments = []
        self._state = TrackState.TRACKING

        cell = self._start_cell(model)
        total = self.total_distance
        t = 0.0
        surface_in = 0
        logger.debug("Tracking from %s to %s (%.6g) starting in cell %d",
                     self.start, self.end, total, cell.id)

        while True:
            if len(self._segments) >= config.max_track_steps:
                self._state = TrackState.FAILED
                raise IncompleteTrackError(
                    f"Track exceeded {config.max_track_steps} segments",
                    self._segments)

            remaining = total - t
            try:
                d, surface_out = cell.rule.track_surf(
                    self._point_at(t), self.direction, remaining)
            except NoExitError:
                d, surface_out = remaining, 0

            if t + d >= total - config.min_track_step:
                self._segments.append(TrackSegment(cell, surface_in, 0, t, total))
                self._state = TrackState.COMPLETE
                return self

            t_exit = t + d
            self._segments.append(
                TrackSegment(cell, surface_in, surface_out, t, t_exit))
            t = t_exit
            point = self._point_at(t)
            try:
                cell = surface_map.find_neighbor(surface_out, point,
                                                 self.direction, current=cell)
            except NoNeighborError as exc:
                self._state = TrackState.FAILED
                logger.warning("Track left the model at %s (surface %d)",
                               point, surface_out)
                raise IncompleteTrackError(str(exc), self._segments) from exc
            except AmbiguousNeighborError:
                self._state = TrackState.FAILED
                raise
            surface_in = surface_out

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_track(self) -> Tuple[TrackSegment, ...]:
        return tuple(self._segments)

    def get_cells(self) -> List[int]:
        """Cell ids in track order."""
        return [seg.cell_id for seg in self._segments]

    def get_surfaces(self) -> List[int]:
        """Signed entry surface of each segment (0 for the first)."""
        return [seg.surface_in for seg in self._segments]

    def get_lengths(self) -> List[float]:
        return [seg.length for seg in self._segments]

    def path_length(self, material: Any = None) -> float:
        """Total path length through material.

        Args:
            material: Material tag to sum (None = all materials)
        """
        total = 0.0
        for seg in self._segments:
            if material is None or seg.material == material:
                total += seg.length
        return total

    def materials_hit(self) -> Set[Any]:
        """Get set of materials encountered."""
        return {seg.material for seg in self._segments}

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[TrackSegment]:
        return iter(list(self._segments))

    def __getitem__(self, key: Union[int, slice]) -> Union[TrackSegment, List[TrackSegment]]:
        return self._segments[key]

    def __repr__(self) -> str:
        return f"LineTrack({len(self)} segments, {self._state.value})"
