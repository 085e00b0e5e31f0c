# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""
Matplotlib-based plotting for line tracks.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .linetrack import LineTrack

try:
    import matplotlib.pyplot as plt
    from matplotlib.axes import Axes
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


def plot_ray_path(track: 'LineTrack',
                  ax: Optional['Axes'] = None,
                  show_materials: bool = True) -> 'Axes':
    """Plot a line track as a 1D bar chart.

    Args:
        track: Calculated LineTrack
        ax: Matplotlib axes
        show_materials: Color by material (otherwise by cell)

    Returns:
        The matplotlib Axes object
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for plotting")

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 2))

    # Material tags are opaque; number them in order of appearance
    colors = plt.cm.tab10.colors
    color_index: Dict[Any, int] = {}

    for seg in track:
        key = seg.material if show_materials else seg.cell_id
        width = seg.length

        if show_materials and seg.material == 0:
            color = 'lightgray'
        else:
            idx = color_index.setdefault(key, len(color_index))
            color = colors[idx % len(colors)]

        ax.barh(0, width, left=seg.t_enter, height=0.8, color=color,
                edgecolor='black', linewidth=0.5)

        # Add cell label
        if width > 0.1:
            ax.text(seg.t_enter + width / 2, 0, str(seg.cell_id),
                    ha='center', va='center', fontsize=8)

    ax.set_xlim(0, track.total_distance)
    ax.set_ylim(-0.5, 0.5)
    ax.set_yticks([])
    ax.set_xlabel('Distance along track')
    ax.set_title('Track through geometry')

    return ax
