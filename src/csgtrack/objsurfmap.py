# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Surface to cell index used to step from one cell to the next.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple, Union
import logging

from .config import Config
from .errors import AmbiguousNeighborError, NoNeighborError

if TYPE_CHECKING:
    from .cells import Cell

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]


class ObjSurfMap:
    """Bidirectional index between surfaces and the cells that use them.

    Surfaces are indexed by unsigned id so both senses share an entry.
    Owners are kept in registration order. Once frozen the map is read-only
    and can be shared between threads.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        self._owners: Dict[int, List['Cell']] = {}
        self._cell_surfaces: Dict[int, Set[int]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> 'ObjSurfMap':
        self._frozen = True
        logger.debug("Froze surface map: %d surfaces, %d cells",
                     len(self._owners), len(self._cell_surfaces))
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("ObjSurfMap is frozen")

    def clear(self) -> None:
        self._check_mutable()
        self._owners.clear()
        self._cell_surfaces.clear()

    def register_cell(self, cell: 'Cell') -> None:
        """Add cell as an owner of every surface in its rule."""
        self._check_mutable()
        surfaces = self._cell_surfaces.setdefault(cell.id, set())
        for sn in cell.surface_numbers:
            key = abs(sn)
            owners = self._owners.setdefault(key, [])
            if not any(owner is cell for owner in owners):
                owners.append(cell)
            surfaces.add(key)

    def remove_cell(self, cell: 'Cell') -> None:
        """Drop cell from every owner list."""
        self._check_mutable()
        for key in self._cell_surfaces.pop(cell.id, set()):
            owners = [o for o in self._owners.get(key, []) if o is not cell]
            if owners:
                self._owners[key] = owners
            else:
                self._owners.pop(key, None)

    def get_owners(self, surface_id: int) -> List['Cell']:
        """Cells whose rule uses surface |surface_id|."""
        return list(self._owners.get(abs(surface_id), []))

    def get_surfaces(self, cell_id: int) -> Set[int]:
        """Unsigned surface ids used by cell_id."""
        return set(self._cell_surfaces.get(cell_id, set()))

    def surface_ids(self) -> List[int]:
        return sorted(self._owners)

    def shared_surfaces(self, cell_a: int, cell_b: int) -> Set[int]:
        """Surfaces used by both cells."""
        return self.get_surfaces(cell_a) & self.get_surfaces(cell_b)

    def find_neighbor(self, surface_id: int, point: Point, direction: Point,
                      current: Union['Cell', int, None] = None) -> 'Cell':
        """Cell entered when crossing surface_id at point along direction.

        Args:
            surface_id: Surface being crossed (sign ignored).
            point: Crossing point.
            direction: Unit direction of travel.
            current: Cell (or cell id) being left; excluded from the search.

        Raises:
            AmbiguousNeighborError: Several owners contain the probe point.
            NoNeighborError: No owner contains the probe point.
        """
        current_id = getattr(current, 'id', current)
        step = self.config.probe_step
        probe = (point[0] + step * direction[0],
                 point[1] + step * direction[1],
                 point[2] + step * direction[2])
        matches = [cell for cell in self._owners.get(abs(surface_id), [])
                   if cell.id != current_id and cell.is_valid(probe)]
        if len(matches) > 1:
            raise AmbiguousNeighborError(abs(surface_id), point, matches)
        if not matches:
            raise NoNeighborError(abs(surface_id), point)
        return matches[0]

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return (f"ObjSurfMap({len(self._owners)} surfaces, "
                f"{len(self._cell_surfaces)} cells, {state})")
