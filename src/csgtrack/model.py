# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Model class: surfaces, cells and the queries that run on them.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING
import logging

import numpy as np

from .cells import Cell, CellCollection
from .config import Config
from .errors import UnknownSurfaceError
from .headrule import HeadRule
from .linetrack import LineTrack
from .objsurfmap import ObjSurfMap
from .surfaces import SurfaceRegistry

if TYPE_CHECKING:
    from .rules import Rule
    from .surfaces import Surface

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]
Bounds = Tuple[float, float, float, float, float, float]


class Model:
    """Complete geometry model.

    The Model holds a surface registry and the cells built on it. Cells
    are indexed by surface on the first query (or on freeze()); any edit
    marks the model dirty and the index is rebuilt lazily.

    Example:
        model = Model()
        model.add_surface(1, Sphere(0, 0, 0, radius=5.0))
        model.add_cell("1", material="void")
        model.add_cell("-1", material="fuel")

        track = model.trace(start=(-10, 0, 0), end=(10, 0, 0))
        print(track.get_lengths())   # [5.0, 10.0, 5.0]
    """

    def __init__(self, title: str = "csgtrack Model",
                 config: Optional[Config] = None):
        """
        Args:
            title: Model title.
            config: Shared settings (defaults to Config()).
        """
        self.title = title
        self._config = config if config is not None else Config()
        self.registry = SurfaceRegistry(self._config)
        self._cells: Dict[int, Cell] = {}
        self._surface_map: Optional[ObjSurfMap] = None
        self._dirty = True

    def _rebuild_if_needed(self):
        """Rebuild the surface/cell index if dirty."""
        if not self._dirty:
            return
        surface_map = ObjSurfMap(self._config)
        for cell in self._cells.values():
            surface_map.register_cell(cell)
        self._surface_map = surface_map.freeze()
        self._dirty = False
        logger.debug("Indexed %d cells over %d surfaces",
                     len(self._cells), len(surface_map.surface_ids()))

    def freeze(self) -> 'Model':
        """Build the surface index now; queries are read-only afterwards.

        Returns:
            self for chaining
        """
        self._rebuild_if_needed()
        return self

    @property
    def surface_map(self) -> ObjSurfMap:
        """Frozen surface to cell index."""
        self._rebuild_if_needed()
        return self._surface_map

    # =========================================================================
    # Surfaces
    # =========================================================================

    def add_surface(self, surface_id: int, surface: 'Surface') -> 'Surface':
        """Register surface under surface_id.

        Raises:
            DuplicateSurfaceError: If surface_id is already used.
        """
        return self.registry.register(surface_id, surface)

    @property
    def surfaces(self) -> Dict[int, 'Surface']:
        """Get all surfaces by ID."""
        return {sid: self.registry.get(sid) for sid in self.registry.ids()}

    # =========================================================================
    # Cells
    # =========================================================================

    def add_cell(self, rule: Union[str, HeadRule, 'Rule', int],
                 cell_id: Optional[int] = None, material: Any = 0,
                 name: Optional[str] = None) -> Cell:
        """Add a cell to the model.

        Args:
            rule: Rule expression, Rule tree or HeadRule defining the cell.
            cell_id: Cell number (auto-assigned if None).
            material: Material tag (0 for void).
            name: Optional cell name.

        Returns:
            The created Cell.

        Raises:
            RuleParseError: If rule is a malformed expression.
            UnknownSurfaceError: If rule uses an unregistered surface.
            ValueError: If cell_id is already used, or rule is an AlwaysFalse
                marker with no surface.
        """
        if cell_id is None:
            cell_id = max(self._cells.keys(), default=0) + 1

        if cell_id in self._cells:
            raise ValueError(f"Cell {cell_id} already exists")

        head = HeadRule(rule, self.registry)
        for sn in head.get_surface_set():
            if sn not in self.registry:
                raise UnknownSurfaceError(sn)

        cell = Cell(cell_id, head, material=material, name=name)
        self._cells[cell_id] = cell
        self._dirty = True
        logger.debug("Added cell %d: %s", cell_id, head.display())
        return cell

    def get_cell(self, cell_id: int) -> Cell:
        """Get cell by ID.

        Raises:
            KeyError: If cell not found
        """
        try:
            return self._cells[cell_id]
        except KeyError:
            raise KeyError(f"Cell {cell_id} not found") from None

    def __getitem__(self, cell_id: int) -> Cell:
        """Get cell by ID using subscript notation.

        Example:
            cell = model[10]
            print(cell.material)
        """
        return self.get_cell(cell_id)

    def remove_cell(self, cell_id: int) -> None:
        """Remove cell by ID."""
        if cell_id in self._cells:
            del self._cells[cell_id]
            self._dirty = True

    @property
    def cells(self) -> CellCollection:
        """Get cell collection with filtering support.

        Example:
            for cell in model.cells:
                print(cell.id, cell.material)

            fuel_cells = model.cells.by_material("fuel")
            len(model.cells)
        """
        return CellCollection(self._cells.values())

    # =========================================================================
    # Queries
    # =========================================================================

    def cells_at(self, point: Point) -> List[Cell]:
        """All cells containing point, in insertion order.

        A point on a shared boundary belongs to every cell it bounds.
        """
        return [cell for cell in self._cells.values() if cell.is_valid(point)]

    def find_cell(self, point: Point,
                  hint: Union[Cell, int, None] = None) -> Optional[Cell]:
        """Find a cell containing point.

        The hint cell is tested first, then the cells sharing a surface
        with it, then every cell.

        Args:
            point: Point coordinates
            hint: Cell (or id) where the point is likely to be

        Returns:
            The containing Cell, or None if the point is outside the model
        """
        tried = set()
        if hint is not None:
            hint_cell = hint if isinstance(hint, Cell) else self._cells.get(hint)
            if hint_cell is not None:
                if hint_cell.is_valid(point):
                    return hint_cell
                tried.add(hint_cell.id)
                surface_map = self.surface_map
                for sn in surface_map.get_surfaces(hint_cell.id):
                    for cell in surface_map.get_owners(sn):
                        if cell.id in tried:
                            continue
                        if cell.is_valid(point):
                            return cell
                        tried.add(cell.id)
        for cell in self._cells.values():
            if cell.id not in tried and cell.is_valid(point):
                return cell
        return None

    def trace(self, origin: Optional[Point] = None,
              direction: Optional[Point] = None,
              start: Optional[Point] = None,
              end: Optional[Point] = None,
              max_distance: float = 0) -> LineTrack:
        """Trace a line through the geometry.

        Can be called in two ways:
        1. With start and end points: trace(start=(0,0,0), end=(100,0,0))
        2. With origin, direction and max_distance:
           trace(origin=(0,0,0), direction=(1,0,0), max_distance=100)

        Returns:
            The calculated LineTrack

        Raises:
            ValueError: On a missing or degenerate argument combination.
        """
        if start is not None and end is not None:
            track = LineTrack(start, end)
        elif origin is not None and direction is not None:
            if max_distance <= 0:
                raise ValueError("max_distance must be positive for a direction trace")
            track = LineTrack.from_direction(origin, direction, max_distance)
        else:
            raise ValueError("Must provide either (origin, direction) or (start, end)")
        return track.calculate(self)

    # =========================================================================
    # Rule Maintenance
    # =========================================================================

    def substitute_surface(self, old_id: int, new_id: int) -> int:
        """Renumber surface old_id to new_id in every cell.

        Returns:
            Number of literals rewritten.

        Raises:
            UnknownSurfaceError: If new_id is not registered.
        """
        if new_id not in self.registry:
            raise UnknownSurfaceError(abs(new_id))
        count = 0
        for cell in self._cells.values():
            count += cell.substitute_surface(old_id, new_id)
        if count:
            self._dirty = True
        logger.debug("Substituted surface %d -> %d in %d literals",
                     old_id, new_id, count)
        return count

    def simplify(self, remove_empty: bool = True) -> Dict[str, Any]:
        """Minimize every cell rule.

        Cells that turn out empty are removed (or set to "s -s" when
        remove_empty is False; a rule with no literal keeps its form).
        Unbounded results leave an empty rule.

        Returns:
            Dict with simplification statistics.

        Example:
            stats = model.simplify()
            print(f"{stats['literals_before']} -> {stats['literals_after']} literals")
        """
        from .algebra import Algebra, SimplifyStatus

        algebra = Algebra(config=self._config)
        stats = {
            'cells': len(self._cells),
            'literals_before': 0,
            'literals_after': 0,
            'minimized': 0,
            'unminimized': 0,
            'always_true': 0,
            'always_false': 0,
            'removed': [],
        }
        for cell in list(self._cells.values()):
            result = cell.rule.simplify(algebra)
            stats['literals_before'] += result.literals_before
            if result.status is SimplifyStatus.ALWAYS_FALSE:
                stats['always_false'] += 1
                if remove_empty:
                    logger.warning("Cell %d is empty; removed", cell.id)
                    del self._cells[cell.id]
                    stats['removed'].append(cell.id)
                    continue
                if result.rule.surface is not None:
                    cell.rule = HeadRule(result.display(), self.registry)
            elif result.status is SimplifyStatus.UNMINIMIZED:
                stats['unminimized'] += 1
            else:
                if result.status is SimplifyStatus.ALWAYS_TRUE:
                    stats['always_true'] += 1
                    logger.info("Cell %d is unbounded", cell.id)
                else:
                    stats['minimized'] += 1
                cell.rule = result.as_headrule(self.registry)
            cell.refresh_surfaces()
            stats['literals_after'] += cell.rule.literal_count()
        self._dirty = True
        return stats

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> List[str]:
        """Validate model for common issues.

        Returns:
            List of warning/error messages.
        """
        from .algebra import Algebra

        issues = []
        algebra = Algebra(config=self._config)
        used = set()
        for cell in self._cells.values():
            surfaces = cell.rule.get_surface_set()
            used.update(surfaces)
            if cell.rule.is_empty():
                issues.append(f"Cell {cell.id} has no bounding surfaces")
                continue
            if len(surfaces) <= algebra.max_literals:
                _, minterms = algebra.truth_table(cell.rule)
                if not minterms:
                    issues.append(f"Cell {cell.id} is empty")

        for sid in self.registry.ids():
            if sid not in used:
                issues.append(f"Surface {sid} is not used by any cell")
        return issues

    # =========================================================================
    # Sampling
    # =========================================================================

    def estimate_cell_volumes(self, n_points: int = 100000,
                              bounds: Optional[Bounds] = None,
                              seed: Optional[int] = None) -> Dict[int, float]:
        """Estimate cell volumes by uniform random sampling of a box.

        Args:
            n_points: Number of sample points
            bounds: (x_min, x_max, y_min, y_max, z_min, z_max)
            seed: Random seed for reproducible estimates

        Returns:
            Dict mapping cell ID to estimated volume. Points in no cell
            are not counted.
        """
        if bounds is None:
            raise ValueError("bounds is required")
        if n_points <= 0:
            raise ValueError("n_points must be positive")
        x_min, x_max, y_min, y_max, z_min, z_max = bounds
        box_volume = (x_max - x_min) * (y_max - y_min) * (z_max - z_min)
        if box_volume <= 0:
            raise ValueError("bounds must enclose a positive volume")

        rng = np.random.default_rng(seed)
        low = np.array([x_min, y_min, z_min])
        high = np.array([x_max, y_max, z_max])
        points = rng.uniform(low, high, size=(n_points, 3))

        counts = {cell_id: 0 for cell_id in self._cells}
        hint = None
        for p in points:
            cell = self.find_cell((float(p[0]), float(p[1]), float(p[2])), hint)
            if cell is not None:
                counts[cell.id] += 1
                hint = cell
        return {cell_id: box_volume * n / n_points for cell_id, n in counts.items()}

    def sample_mesh(self, bounds: Bounds,
                    shape: Sequence[int] = (10, 10, 10),
                    outside: Any = -1) -> Dict[str, Any]:
        """Sample geometry at the element centres of a structured mesh.

        Args:
            bounds: (x_min, x_max, y_min, y_max, z_min, z_max)
            shape: Number of elements per axis (nx, ny, nz)
            outside: Value stored where no cell contains the centre

        Returns:
            Dict with 'cell_ids' and 'materials' arrays of the given shape
            (indexed [ix, iy, iz]) and the centre coordinates 'x', 'y', 'z'.

        Example:
            result = model.sample_mesh((-10, 10, -10, 10, -1, 1), shape=(50, 50, 1))
            fuel = result['materials'] == "fuel"
        """
        nx, ny, nz = shape
        if min(nx, ny, nz) <= 0:
            raise ValueError("shape entries must be positive")
        x_min, x_max, y_min, y_max, z_min, z_max = bounds

        def centres(lo, hi, n):
            step = (hi - lo) / n
            return lo + step * (np.arange(n) + 0.5)

        xs = centres(x_min, x_max, nx)
        ys = centres(y_min, y_max, ny)
        zs = centres(z_min, z_max, nz)
        cell_ids = np.empty((nx, ny, nz), dtype=object)
        materials = np.empty((nx, ny, nz), dtype=object)

        hint = None
        n_outside = 0
        for ix, x in enumerate(xs):
            for iy, y in enumerate(ys):
                for iz, z in enumerate(zs):
                    cell = self.find_cell((float(x), float(y), float(z)), hint)
                    if cell is None:
                        cell_ids[ix, iy, iz] = outside
                        materials[ix, iy, iz] = outside
                        n_outside += 1
                    else:
                        cell_ids[ix, iy, iz] = cell.id
                        materials[ix, iy, iz] = cell.material
                        hint = cell
        if n_outside:
            logger.info("%d of %d mesh points are outside the model",
                        n_outside, nx * ny * nz)
        return {'cell_ids': cell_ids, 'materials': materials,
                'x': xs, 'y': ys, 'z': zs, 'shape': (nx, ny, nz)}

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def config(self) -> Dict[str, Any]:
        """Get current configuration as a dictionary.

        Returns:
            Dict with keys 'zero_tol', 'min_track_step', 'probe_step',
            'max_literals', 'exhaustive_limit', 'max_track_steps'.
        """
        return self._config.as_dict()

    @config.setter
    def config(self, settings: Dict[str, Any]) -> None:
        """Update configuration from a dictionary.

        Only provided keys are changed; others keep their current values.

        Example:
            model.config = {'zero_tol': 1e-8, 'max_literals': 16}
        """
        self._config.update(settings)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"Model: {len(self._cells)} cells, {len(self.registry)} surfaces"

    def __repr__(self) -> str:
        return (f"Model(title='{self.title}', cells={len(self._cells)}, "
                f"surfaces={len(self.registry)})")
