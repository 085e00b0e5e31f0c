# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Cell and collection classes.

A cell is a region of space defined by a HeadRule and tagged with an
opaque material. CellCollection provides Pythonic iteration, filtering and
selection over a set of cells.
"""

from __future__ import annotations
from typing import (
    Any, Callable, Iterable, Iterator, List, Optional, Set, Tuple, Union
)

from .headrule import HeadRule


class Cell:
    """Region of space with a material.

    Attributes:
        id: Cell number (must be positive).
        rule: HeadRule defining the cell geometry.
        material: Material tag, opaque to the kernel (0 for void).
        name: Optional cell name.
    """

    def __init__(self, id: int, rule: HeadRule, material: Any = 0,
                 name: Optional[str] = None):
        if id <= 0:
            raise ValueError("Cell ID must be positive")
        self.id = id
        self.rule = rule
        self.material = material
        self.name = name
        self._surfaces: Optional[List[int]] = None

    @property
    def surface_numbers(self) -> List[int]:
        """Signed surface literals of the rule (cached)."""
        if self._surfaces is None:
            self._surfaces = self.rule.get_surface_numbers()
        return list(self._surfaces)

    def refresh_surfaces(self) -> None:
        """Drop the cached surface list after editing the rule directly."""
        self._surfaces = None

    @property
    def is_void(self) -> bool:
        """Check if cell is void (no material)."""
        return self.material == 0

    def is_valid(self, point: Tuple[float, float, float]) -> bool:
        """Check if point is inside this cell."""
        return self.rule.is_valid(point)

    def substitute_surface(self, old_id: int, new_id: int) -> int:
        """Renumber a surface in the rule; returns the literal count changed."""
        count = self.rule.substitute_surface(old_id, new_id)
        if count:
            self.refresh_surfaces()
        return count

    def display(self) -> str:
        return self.rule.display()

    def __repr__(self) -> str:
        name = f", name='{self.name}'" if self.name else ""
        return f"Cell({self.id}, material={self.material!r}{name})"


class CellCollection:
    """Collection of cells with filtering capabilities.

    Supports iteration, indexing, and filtering operations.
    Filter methods return new CellCollection instances that can be chained.

    Example:
        # Iterate all cells
        for cell in model.cells:
            print(cell.id, cell.material)

        # Filter by material
        fuel_cells = model.cells.by_material("fuel")

        # Chain filters
        named = model.cells.by_material("fuel").filter(lambda c: c.name)
    """

    def __init__(self, cells: Iterable[Cell]):
        self._cells: List[Cell] = list(cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, key: Union[int, slice]) -> Union[Cell, 'CellCollection']:
        if isinstance(key, int):
            if key < -len(self._cells) or key >= len(self._cells):
                raise IndexError(f"Cell index {key} out of range")
            return self._cells[key]
        elif isinstance(key, slice):
            return CellCollection(self._cells[key])
        else:
            raise TypeError(f"Invalid index type: {type(key)}")

    def __contains__(self, cell: object) -> bool:
        return any(cell is c for c in self._cells)

    def __repr__(self) -> str:
        return f"CellCollection({len(self)} cells)"

    def by_material(self, material: Any) -> 'CellCollection':
        """Filter cells by material tag."""
        return CellCollection(c for c in self._cells if c.material == material)

    def filter(self, predicate: Callable[[Cell], bool]) -> 'CellCollection':
        """Filter cells using a custom predicate function.

        Example:
            bounded = model.cells.filter(lambda c: not c.rule.is_empty())
        """
        return CellCollection(c for c in self._cells if predicate(c))

    def get(self, cell_id: int) -> Optional[Cell]:
        """Get a cell by its ID, or None."""
        for cell in self._cells:
            if cell.id == cell_id:
                return cell
        return None

    def ids(self) -> List[int]:
        """Get list of cell IDs in this collection."""
        return [c.id for c in self._cells]

    def materials(self) -> Set[Any]:
        """Get set of unique material tags in this collection."""
        return {c.material for c in self._cells}

    def to_list(self) -> List[Cell]:
        return list(self._cells)
