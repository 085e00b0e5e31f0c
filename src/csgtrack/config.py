# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Numerical tolerances and cost limits shared by a model's components.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict


@dataclass
class Config:
    """Kernel settings.

    Attributes:
        zero_tol: On-surface tolerance for side classification. A point whose
            surface function is within this value of zero is on the surface.
        min_track_step: Distance tolerance along a ray. Hits and chords
            shorter than this are ignored; a track within this distance of
            its end point is complete.
        probe_step: Offset past a crossing point used to pick the next cell.
        max_literals: Rules with more distinct surfaces than this are not
            minimized.
        exhaustive_limit: Largest number of non-essential prime implicants
            searched exhaustively for a minimal cover.
        max_track_steps: Upper bound on segments per line track.
    """
    zero_tol: float = 1e-6
    min_track_step: float = 1e-5
    probe_step: float = 1e-5
    max_literals: int = 12
    exhaustive_limit: int = 12
    max_track_steps: int = 100000

    def __post_init__(self):
        self._check()

    def _check(self) -> None:
        for name in ('zero_tol', 'min_track_step', 'probe_step'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in ('max_literals', 'exhaustive_limit', 'max_track_steps'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    def as_dict(self) -> Dict[str, Any]:
        """Return settings as a plain dict."""
        return asdict(self)

    def update(self, settings: Dict[str, Any]) -> None:
        """Update settings from a dict; only the given keys change.

        Raises:
            KeyError: For unknown keys (nothing is changed).
            ValueError: For out-of-range values (nothing is changed).
        """
        known = {f.name for f in fields(self)}
        unknown = set(settings) - known
        if unknown:
            raise KeyError(f"Unknown config keys: {sorted(unknown)}")
        old = self.as_dict()
        for key, value in settings.items():
            setattr(self, key, value)
        try:
            self._check()
        except ValueError:
            for key, value in old.items():
                setattr(self, key, value)
            raise
