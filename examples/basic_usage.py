#!/usr/bin/env python3
"""
Basic usage example for the csgtrack CSG library.

This example demonstrates how to:
1. Define surfaces and cells from rule expressions
2. Query the geometry (point queries, line tracking)
3. Filter and inspect cells
4. Minimize cell rules
"""

import csgtrack as ct
from csgtrack.surfaces import CylinderZ, XPlane, YPlane, ZPlane

# =============================================================================
# 1. Create a simple reactor pin cell geometry
# =============================================================================

print("=" * 60)
print("Creating a simple PWR fuel pin cell geometry")
print("=" * 60)

model = ct.Model("PWR Fuel Pin Cell")

# Fuel pellet and cladding outer radius (cm)
model.add_surface(1, CylinderZ(0, 0, radius=0.4096))
model.add_surface(2, CylinderZ(0, 0, radius=0.475))

# Water box (half-pitch 0.63 cm), 2 cm high
model.add_surface(3, XPlane(-0.63))
model.add_surface(4, XPlane(0.63))
model.add_surface(5, YPlane(-0.63))
model.add_surface(6, YPlane(0.63))
model.add_surface(7, ZPlane(-1.0))
model.add_surface(8, ZPlane(1.0))

# Rules: -n is the inside (negative side) of surface n, +n the outside.
# Juxtaposition is intersection, '+' is union, '#' is complement.
model.add_cell("-1 7 -8", material="UO2", name="fuel")
model.add_cell("1 -2 7 -8", material="Zr", name="cladding")
model.add_cell("2 3 -4 5 -6 7 -8", material="H2O", name="moderator")
model.add_cell("#(3 -4 5 -6 7 -8)", material=0, name="outside")

print(f"\n{model}")
print()

# =============================================================================
# 2. Inspect the geometry
# =============================================================================

print("=" * 60)
print("Inspecting the geometry")
print("=" * 60)

for cell in model.cells:
    print(f"  Cell {cell.id:2d} ({cell.name:10s}): {cell.display()}")

print(f"\nMaterials: {sorted(str(m) for m in model.cells.materials())}")
print(f"Non-void cells: {model.cells.filter(lambda c: not c.is_void).ids()}")

issues = model.validate()
print(f"Validation issues: {issues or 'none'}")
print()

# =============================================================================
# 3. Point queries and line tracking
# =============================================================================

print("=" * 60)
print("Point queries")
print("=" * 60)

for point in [(0, 0, 0), (0.45, 0, 0), (0.6, 0.6, 0), (2, 0, 0)]:
    cell = model.find_cell(point)
    name = cell.name if cell else "none"
    print(f"  {point}: {name}")
print()

print("=" * 60)
print("Tracking a line across the pin")
print("=" * 60)

track = model.trace(start=(-1.0, 0, 0), end=(1.0, 0, 0))
for seg in track:
    print(f"  cell {seg.cell_id} ({seg.material}): "
          f"{seg.t_enter:.4f} -> {seg.t_exit:.4f}  [{seg.length:.4f} cm]")

print(f"\nPath length in fuel: {track.path_length('UO2'):.4f} cm")
print(f"Path length in water: {track.path_length('H2O'):.4f} cm")
print()

# =============================================================================
# 4. Rule minimization
# =============================================================================

print("=" * 60)
print("Rule minimization")
print("=" * 60)

algebra = ct.Algebra()
for text in ["1 2 + 1 -2", "#(1 2) + 1", "-3 4 + -3 -4 + 3"]:
    result = algebra.simplify(text)
    print(f"  {text!r:24} -> {result.display()!r} ({result.status.value})")

stats = model.simplify()
print(f"\nModel literals: {stats['literals_before']} -> {stats['literals_after']}")
