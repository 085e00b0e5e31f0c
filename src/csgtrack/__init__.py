# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
csgtrack: Constructive Solid Geometry cells and line tracking

A Python package for defining cells as boolean rules over quadric
surfaces, minimizing those rules, and tracking straight lines through
the resulting geometry.

Example:
    import csgtrack as ct

    model = ct.Model()
    model.add_surface(1, ct.Sphere(0, 0, 0, radius=5.0))
    model.add_surface(2, ct.XPlane(0.0))
    model.add_cell("1", material="void")
    model.add_cell("-1 -2", material="fuel")
    model.add_cell("-1 2", material="clad")

    track = model.trace(start=(-10, 0, 0), end=(10, 0, 0))
    print(track.get_cells(), track.get_lengths())

    ct.Algebra().simplify("1 2 + 1 -2").display()   # '1'
"""

__version__ = "0.1.0"

import logging

from .rules import (
    Rule,
    Literal,
    Intersection,
    Union,
    Complement,
    AlwaysTrue,
    AlwaysFalse,
)

from .surfaces import (
    Surface,
    Plane,
    XPlane,
    YPlane,
    ZPlane,
    Sphere,
    CylinderX,
    CylinderY,
    CylinderZ,
    ConeX,
    ConeY,
    ConeZ,
    SurfaceRegistry,
)

from .headrule import HeadRule, parse_rule
from .bnid import BnId
from .acomp import Acomp
from .algebra import Algebra, SimplifyResult, SimplifyStatus
from .objsurfmap import ObjSurfMap
from .linetrack import LineTrack, TrackSegment, TrackState
from .cells import Cell, CellCollection
from .model import Model
from .config import Config

from .errors import (
    CSGError,
    RuleParseError,
    UnknownSurfaceError,
    DuplicateSurfaceError,
    NoExitError,
    NoNeighborError,
    AmbiguousNeighborError,
    StartNotInAnyCellError,
    IncompleteTrackError,
)

# Logging integration (levels drive the "csgtrack" logger)
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())

LOG_TRACE = 5
LOG_DEBUG = logging.DEBUG
LOG_INFO = logging.INFO
LOG_WARN = logging.WARNING
LOG_ERROR = logging.ERROR
LOG_NONE = logging.CRITICAL + 10
logging.addLevelName(LOG_TRACE, "TRACE")


def set_log_level(level: int) -> None:
    """Set the package log level (one of the LOG_* constants)."""
    _logger.setLevel(level)


def get_log_level() -> int:
    """Current package log level."""
    return _logger.getEffectiveLevel()


def enable_logging():
    """Enable logging at INFO level."""
    set_log_level(LOG_INFO)


def disable_logging():
    """Disable logging."""
    set_log_level(LOG_NONE)


# Plotting (plot_ray_path raises ImportError without matplotlib)
from .plotting import plot_ray_path, HAS_MATPLOTLIB as HAS_PLOTTING

__all__ = [
    # Rules
    'Rule',
    'Literal',
    'Intersection',
    'Union',
    'Complement',
    'AlwaysTrue',
    'AlwaysFalse',
    'HeadRule',
    'parse_rule',
    # Surfaces
    'Surface',
    'Plane',
    'XPlane',
    'YPlane',
    'ZPlane',
    'Sphere',
    'CylinderX',
    'CylinderY',
    'CylinderZ',
    'ConeX',
    'ConeY',
    'ConeZ',
    'SurfaceRegistry',
    # Simplifier
    'BnId',
    'Acomp',
    'Algebra',
    'SimplifyResult',
    'SimplifyStatus',
    # Model and tracking
    'Model',
    'Cell',
    'CellCollection',
    'ObjSurfMap',
    'LineTrack',
    'TrackSegment',
    'TrackState',
    'Config',
    # Errors
    'CSGError',
    'RuleParseError',
    'UnknownSurfaceError',
    'DuplicateSurfaceError',
    'NoExitError',
    'NoNeighborError',
    'AmbiguousNeighborError',
    'StartNotInAnyCellError',
    'IncompleteTrackError',
    # Logging
    'LOG_NONE',
    'LOG_ERROR',
    'LOG_WARN',
    'LOG_INFO',
    'LOG_DEBUG',
    'LOG_TRACE',
    'set_log_level',
    'get_log_level',
    'enable_logging',
    'disable_logging',
    # Plotting
    'plot_ray_path',
    'HAS_PLOTTING',
]
