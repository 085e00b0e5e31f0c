# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Surface definitions and the surface registry.

Surfaces divide space into two halfspaces (positive and negative). Every
supported surface is a quadric, so its function along a line
o + t*u is a polynomial of degree at most two in t. Line intersections and
crossing directions are derived from that in the base class.

Surfaces carry no id. Ids are bound by a SurfaceRegistry, which is owned by
a Model; rule literals refer to surfaces only through those ids.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import math

from .config import Config
from .errors import DuplicateSurfaceError, UnknownSurfaceError

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]


class Surface(ABC):
    """Abstract base class for surfaces.

    A surface divides 3D space into two regions (halfspaces).
    The sign convention is:
        - Positive halfspace: f(x,y,z) > 0
        - Negative halfspace: f(x,y,z) < 0

    For closed surfaces (sphere, cylinder, cone):
        - Negative = inside
        - Positive = outside

    Attributes:
        name: Optional human-readable name.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name

    @abstractmethod
    def evaluate(self, point: Point) -> float:
        """Evaluate surface equation at point.

        Returns positive value if point is on positive side,
        negative if on negative side, zero if on surface.
        """
        pass

    def side(self, point: Point, tol: float = 1e-6) -> int:
        """Classify point as +1 / -1, or 0 when within tol of the surface."""
        value = self.evaluate(point)
        if abs(value) <= tol:
            return 0
        return 1 if value > 0 else -1

    def _line_coefficients(self, origin: Point,
                           direction: Point) -> Tuple[float, float, float]:
        """Coefficients (a, b, c) of f(origin + t*direction) = a t^2 + b t + c."""
        ox, oy, oz = origin
        ux, uy, uz = direction
        c = self.evaluate(origin)
        fp = self.evaluate((ox + ux, oy + uy, oz + uz))
        fm = self.evaluate((ox - ux, oy - uy, oz - uz))
        a = 0.5 * (fp + fm) - c
        b = 0.5 * (fp - fm)
        return a, b, c

    def intersect_line(self, origin: Point, direction: Point) -> List[float]:
        """Distances t (any sign, ascending) where origin + t*direction meets the surface."""
        a, b, c = self._line_coefficients(origin, direction)
        scale = max(abs(a), abs(b), abs(c), 1.0)
        if abs(a) <= 1e-12 * scale:
            if abs(b) <= 1e-12 * scale:
                return []
            return [-c / b]
        disc = b * b - 4.0 * a * c
        if disc < 0:
            return []
        root = math.sqrt(disc)
        # Stable form avoids cancellation for the small root
        q = -0.5 * (b + math.copysign(root, b))
        if q == 0.0:
            return [0.0]
        t1, t2 = q / a, c / q
        return sorted((t1, t2))

    def side_direction(self, point: Point, direction: Point) -> int:
        """Sign of the directional derivative of f at point.

        +1 when moving along direction goes to the positive side, -1 towards
        the negative side, 0 when tangent.
        """
        _, b, _ = self._line_coefficients(point, direction)
        if b == 0.0:
            return 0
        return 1 if b > 0 else -1

    def __repr__(self) -> str:
        if self.name:
            return f"{self.__class__.__name__}(name='{self.name}')"
        return f"{self.__class__.__name__}()"


class Plane(Surface):
    """General plane: ax + by + cz = d

    The sign convention is: f(x,y,z) = ax + by + cz - d
        - Positive halfspace: ax + by + cz > d (in direction of normal)
        - Negative halfspace: ax + by + cz < d (opposite to normal)
    """

    def __init__(self, a: float, b: float, c: float, d: float,
                 name: Optional[str] = None):
        """
        Args:
            a, b, c: Normal vector components.
            d: Distance from origin (ax + by + cz = d).
            name: Optional surface name.
        """
        super().__init__(name=name)
        # Normalize
        norm = math.sqrt(a*a + b*b + c*c)
        if norm < 1e-10:
            raise ValueError("Plane normal vector cannot be zero")
        self.a = a / norm
        self.b = b / norm
        self.c = c / norm
        self.d = d / norm

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        return self.a * x + self.b * y + self.c * z - self.d

    def intersect_line(self, origin: Point, direction: Point) -> List[float]:
        ux, uy, uz = direction
        denom = self.a * ux + self.b * uy + self.c * uz
        if abs(denom) < 1e-12:
            return []
        return [-self.evaluate(origin) / denom]


class XPlane(Plane):
    """Plane perpendicular to X axis: x = x0"""

    def __init__(self, x0: float, name: Optional[str] = None):
        super().__init__(1, 0, 0, x0, name=name)
        self.x0 = x0


class YPlane(Plane):
    """Plane perpendicular to Y axis: y = y0"""

    def __init__(self, y0: float, name: Optional[str] = None):
        super().__init__(0, 1, 0, y0, name=name)
        self.y0 = y0


class ZPlane(Plane):
    """Plane perpendicular to Z axis: z = z0"""

    def __init__(self, z0: float, name: Optional[str] = None):
        super().__init__(0, 0, 1, z0, name=name)
        self.z0 = z0


class Sphere(Surface):
    """Sphere: (x-x0)² + (y-y0)² + (z-z0)² = R²

    Sign convention:
        - Negative: inside sphere (r < R)
        - Positive: outside sphere (r > R)
    """

    def __init__(self, x0: float, y0: float, z0: float, radius: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if radius <= 0:
            raise ValueError("Sphere radius must be positive")
        self.x0 = x0
        self.y0 = y0
        self.z0 = z0
        self.radius = radius

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dy, dz = x - self.x0, y - self.y0, z - self.z0
        return dx*dx + dy*dy + dz*dz - self.radius*self.radius


class CylinderX(Surface):
    """Infinite cylinder along X axis: (y-y0)² + (z-z0)² = R²"""

    def __init__(self, y0: float, z0: float, radius: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if radius <= 0:
            raise ValueError("Cylinder radius must be positive")
        self.y0 = y0
        self.z0 = z0
        self.radius = radius

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dy, dz = y - self.y0, z - self.z0
        return dy*dy + dz*dz - self.radius*self.radius


class CylinderY(Surface):
    """Infinite cylinder along Y axis: (x-x0)² + (z-z0)² = R²"""

    def __init__(self, x0: float, z0: float, radius: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if radius <= 0:
            raise ValueError("Cylinder radius must be positive")
        self.x0 = x0
        self.z0 = z0
        self.radius = radius

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dz = x - self.x0, z - self.z0
        return dx*dx + dz*dz - self.radius*self.radius


class CylinderZ(Surface):
    """Infinite cylinder along Z axis: (x-x0)² + (y-y0)² = R²"""

    def __init__(self, x0: float, y0: float, radius: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if radius <= 0:
            raise ValueError("Cylinder radius must be positive")
        self.x0 = x0
        self.y0 = y0
        self.radius = radius

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dy = x - self.x0, y - self.y0
        return dx*dx + dy*dy - self.radius*self.radius


class ConeX(Surface):
    """Cone along X axis: (y-y0)² + (z-z0)² = t² (x-x0)²

    Both nappes; negative inside.
    """

    def __init__(self, x0: float, y0: float, z0: float, t_sq: float,
                 name: Optional[str] = None):
        """
        Args:
            x0, y0, z0: Apex coordinates.
            t_sq: tan²(half-angle).
        """
        super().__init__(name=name)
        if t_sq <= 0:
            raise ValueError("Cone t_sq must be positive")
        self.x0, self.y0, self.z0 = x0, y0, z0
        self.t_sq = t_sq

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dy, dz = x - self.x0, y - self.y0, z - self.z0
        return dy*dy + dz*dz - self.t_sq * dx*dx


class ConeY(Surface):
    """Cone along Y axis."""

    def __init__(self, x0: float, y0: float, z0: float, t_sq: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if t_sq <= 0:
            raise ValueError("Cone t_sq must be positive")
        self.x0, self.y0, self.z0 = x0, y0, z0
        self.t_sq = t_sq

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dy, dz = x - self.x0, y - self.y0, z - self.z0
        return dx*dx + dz*dz - self.t_sq * dy*dy


class ConeZ(Surface):
    """Cone along Z axis."""

    def __init__(self, x0: float, y0: float, z0: float, t_sq: float,
                 name: Optional[str] = None):
        super().__init__(name=name)
        if t_sq <= 0:
            raise ValueError("Cone t_sq must be positive")
        self.x0, self.y0, self.z0 = x0, y0, z0
        self.t_sq = t_sq

    def evaluate(self, point: Point) -> float:
        x, y, z = point
        dx, dy, dz = x - self.x0, y - self.y0, z - self.z0
        return dx*dx + dy*dy - self.t_sq * dz*dz


class SurfaceRegistry:
    """Binds positive integer ids to surfaces.

    Both senses of a literal (+n / -n) resolve to the same entry.

    Example:
        registry = SurfaceRegistry()
        registry.register(1, XPlane(0.0))
        registry.register(2, Sphere(0, 0, 0, radius=5.0))
        registry.side_of(-2, (1, 1, 1))   # -> -1 (inside)
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        self._surfaces: Dict[int, Surface] = {}

    def register(self, surface_id: int, surface: Surface) -> Surface:
        """Bind surface to surface_id.

        Raises:
            DuplicateSurfaceError: If surface_id is already bound.
            ValueError: If surface_id is not a positive integer.
        """
        if surface_id <= 0:
            raise ValueError("Surface ID must be positive")
        if surface_id in self._surfaces:
            raise DuplicateSurfaceError(surface_id)
        self._surfaces[surface_id] = surface
        logger.debug("Registered surface %d: %r", surface_id, surface)
        return surface

    def remove(self, surface_id: int) -> Surface:
        """Unbind surface_id and return its surface."""
        key = abs(surface_id)
        if key not in self._surfaces:
            raise UnknownSurfaceError(key)
        return self._surfaces.pop(key)

    def get(self, surface_id: int) -> Surface:
        """Surface bound to |surface_id|."""
        try:
            return self._surfaces[abs(surface_id)]
        except KeyError:
            raise UnknownSurfaceError(abs(surface_id)) from None

    def side_of(self, surface_id: int, point: Point) -> int:
        """Side of point relative to surface |surface_id|: +1, -1 or 0 (on it)."""
        return self.get(surface_id).side(point, self.config.zero_tol)

    def ids(self) -> List[int]:
        """Registered ids in registration order."""
        return list(self._surfaces)

    def __contains__(self, surface_id: int) -> bool:
        return abs(surface_id) in self._surfaces

    def __len__(self) -> int:
        return len(self._surfaces)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._surfaces))

    def __repr__(self) -> str:
        return f"SurfaceRegistry({len(self)} surfaces)"
