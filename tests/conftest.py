# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""Pytest fixtures for csgtrack tests."""

import pytest


@pytest.fixture
def sphere_model():
    """Sphere of radius 5 at the origin: cell 1 outside (void), cell 2 inside."""
    import csgtrack as ct

    model = ct.Model("Sphere Model")
    model.add_surface(1, ct.Sphere(0, 0, 0, radius=5.0))
    model.add_cell("1", cell_id=1, material=0, name="outside")
    model.add_cell("-1", cell_id=2, material="A", name="inside")
    return model


@pytest.fixture
def slab_model():
    """Sphere inside a slab -10 < x < 10; nothing exists beyond the slab."""
    import csgtrack as ct

    model = ct.Model("Slab Model")
    model.add_surface(1, ct.XPlane(-10.0))
    model.add_surface(2, ct.XPlane(10.0))
    model.add_surface(3, ct.Sphere(0, 0, 0, radius=5.0))
    model.add_cell("1 -2 3", cell_id=1, material="water", name="moderator")
    model.add_cell("-3", cell_id=2, material="fuel", name="fuel")
    return model


@pytest.fixture
def split_sphere_model():
    """Sphere split by the x = 0 plane, surrounded by void."""
    import csgtrack as ct

    model = ct.Model("Split Sphere")
    model.add_surface(1, ct.Sphere(0, 0, 0, radius=5.0))
    model.add_surface(2, ct.XPlane(0.0))
    model.add_cell("1", cell_id=1, material=0)
    model.add_cell("-1 -2", cell_id=2, material="fuel")
    model.add_cell("-1 2", cell_id=3, material="clad")
    return model


@pytest.fixture
def registry():
    """Registry with plane x = 0 as surface 1 and a radius 5 sphere as surface 2."""
    import csgtrack as ct

    reg = ct.SurfaceRegistry()
    reg.register(1, ct.XPlane(0.0))
    reg.register(2, ct.Sphere(0, 0, 0, radius=5.0))
    return reg
