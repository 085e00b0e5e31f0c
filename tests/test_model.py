# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""Tests for Model operations (cells, queries, maintenance, sampling)."""

import pytest


@pytest.fixture
def plane_model():
    """Two planes x = 0 (surface 1) and y = 0 (surface 2), no cells."""
    import csgtrack as ct

    model = ct.Model("Planes")
    model.add_surface(1, ct.XPlane(0.0))
    model.add_surface(2, ct.YPlane(0.0))
    return model


class TestCells:
    """Adding, getting and removing cells."""

    def test_auto_ids(self, plane_model):
        a = plane_model.add_cell("1")
        b = plane_model.add_cell("-1")
        assert (a.id, b.id) == (1, 2)
        assert plane_model.add_cell("2", cell_id=10).id == 10
        assert plane_model.add_cell("-2").id == 11

    def test_duplicate_id(self, plane_model):
        plane_model.add_cell("1", cell_id=3)
        with pytest.raises(ValueError):
            plane_model.add_cell("-1", cell_id=3)

    def test_unknown_surface(self, plane_model):
        from csgtrack import UnknownSurfaceError

        with pytest.raises(UnknownSurfaceError):
            plane_model.add_cell("1 -5")
        assert len(plane_model.cells) == 0

    def test_parse_error_propagates(self, plane_model):
        from csgtrack import RuleParseError

        with pytest.raises(RuleParseError):
            plane_model.add_cell("1 )")

    def test_accepts_headrule(self, plane_model):
        from csgtrack import HeadRule

        cell = plane_model.add_cell(HeadRule("1 2"), material="steel")
        assert cell.rule.registry is plane_model.registry
        assert cell.is_valid((1, 1, 0))

    def test_get_and_subscript(self, sphere_model):
        assert sphere_model.get_cell(2).material == "A"
        assert sphere_model[1].name == "outside"
        with pytest.raises(KeyError):
            sphere_model.get_cell(99)

    def test_remove_cell(self, sphere_model):
        sphere_model.remove_cell(2)
        assert sphere_model.cells.ids() == [1]
        sphere_model.remove_cell(99)
        assert len(sphere_model.cells) == 1

    def test_surfaces(self, slab_model):
        from csgtrack import Sphere

        surfaces = slab_model.surfaces
        assert sorted(surfaces) == [1, 2, 3]
        assert isinstance(surfaces[3], Sphere)

    def test_cell_properties(self, sphere_model):
        cell = sphere_model[1]
        assert cell.is_void
        assert not sphere_model[2].is_void
        assert cell.surface_numbers == [1]
        assert cell.display() == "1"

    def test_nonpositive_cell_id(self, plane_model):
        with pytest.raises(ValueError):
            plane_model.add_cell("1", cell_id=0)


class TestCellCollection:
    """Tests for CellCollection filtering."""

    def test_iteration_and_len(self, slab_model):
        assert len(slab_model.cells) == 2
        assert [c.id for c in slab_model.cells] == [1, 2]

    def test_by_material(self, slab_model):
        assert slab_model.cells.by_material("fuel").ids() == [2]
        assert len(slab_model.cells.by_material("lead")) == 0

    def test_filter_chain(self, slab_model):
        named = slab_model.cells.filter(lambda c: c.name is not None)
        assert named.by_material("water").ids() == [1]

    def test_indexing(self, slab_model):
        from csgtrack import CellCollection

        cells = slab_model.cells
        assert cells[0].id == 1
        assert cells[-1].id == 2
        assert isinstance(cells[0:1], CellCollection)
        with pytest.raises(IndexError):
            cells[5]
        with pytest.raises(TypeError):
            cells["a"]

    def test_get_and_materials(self, slab_model):
        cells = slab_model.cells
        assert cells.get(2).name == "fuel"
        assert cells.get(99) is None
        assert cells.materials() == {"water", "fuel"}
        assert [c.id for c in cells.to_list()] == [1, 2]
        assert slab_model[1] in cells


class TestQueries:
    """Point location."""

    def test_cells_at(self, sphere_model):
        assert [c.id for c in sphere_model.cells_at((0, 0, 0))] == [2]
        assert [c.id for c in sphere_model.cells_at((5, 0, 0))] == [1, 2]

    def test_find_cell(self, sphere_model):
        assert sphere_model.find_cell((0, 0, 0)).id == 2
        assert sphere_model.find_cell((10, 0, 0), hint=2).id == 1
        assert sphere_model.find_cell((1, 1, 1), hint=sphere_model[2]).id == 2

    def test_find_cell_outside(self, slab_model):
        assert slab_model.find_cell((20, 0, 0)) is None
        assert slab_model.find_cell((20, 0, 0), hint=1) is None

    def test_freeze(self, sphere_model):
        assert sphere_model.freeze() is sphere_model
        assert sphere_model.surface_map.frozen

    def test_index_rebuilt_after_edit(self, sphere_model):
        first = sphere_model.surface_map
        sphere_model.add_cell("-1", cell_id=7)
        second = sphere_model.surface_map
        assert second is not first
        assert [c.id for c in second.get_owners(1)] == [1, 2, 7]

    def test_trace_start_end(self, sphere_model):
        track = sphere_model.trace(start=(-10, 0, 0), end=(10, 0, 0))
        assert track.get_cells() == [1, 2, 1]

    def test_trace_direction(self, sphere_model):
        track = sphere_model.trace(origin=(-10, 0, 0), direction=(2, 0, 0),
                                   max_distance=20)
        assert track.get_lengths() == pytest.approx([5.0, 10.0, 5.0])

    def test_trace_bad_arguments(self, sphere_model):
        with pytest.raises(ValueError):
            sphere_model.trace(origin=(0, 0, 0))
        with pytest.raises(ValueError):
            sphere_model.trace(origin=(-10, 0, 0), direction=(1, 0, 0))


class TestMaintenance:
    """substitute_surface, simplify, validate."""

    def test_substitute_surface(self, sphere_model):
        from csgtrack import Sphere

        sphere_model.add_surface(2, Sphere(0, 0, 0, radius=5.0))
        assert sphere_model.substitute_surface(1, 2) == 2
        assert sphere_model[1].display() == "2"
        assert sphere_model[2].display() == "-2"
        assert sphere_model[2].surface_numbers == [-2]
        assert sphere_model.surface_map.get_surfaces(2) == {2}

    def test_substitute_unknown(self, sphere_model):
        from csgtrack import UnknownSurfaceError

        with pytest.raises(UnknownSurfaceError):
            sphere_model.substitute_surface(1, 8)

    def test_simplify(self, plane_model):
        plane_model.add_cell("1 2 + 1 -2", cell_id=1)
        plane_model.add_cell("1 -1", cell_id=2)
        plane_model.add_cell("1 + -1", cell_id=3)

        stats = plane_model.simplify()

        assert stats['removed'] == [2]
        assert stats['always_false'] == 1
        assert stats['always_true'] == 1
        assert stats['minimized'] == 1
        assert stats['literals_before'] == 8
        assert stats['literals_after'] == 1
        assert plane_model[1].display() == "1"
        assert plane_model[3].rule.is_empty()
        assert plane_model.cells.ids() == [1, 3]

    def test_simplify_keep_empty(self, plane_model):
        plane_model.add_cell("2 -2 1", cell_id=5)
        stats = plane_model.simplify(remove_empty=False)
        assert stats['removed'] == []
        assert plane_model[5].display() == "1 -1"
        assert not plane_model[5].is_valid((1, 1, 1))

    def test_simplify_keeps_marker_rule(self, plane_model):
        from csgtrack import AlwaysFalse

        with pytest.raises(ValueError):
            plane_model.add_cell(AlwaysFalse())
        plane_model.add_cell(AlwaysFalse(1), cell_id=6)
        stats = plane_model.simplify(remove_empty=False)
        assert stats['always_false'] == 1
        assert plane_model[6].display() == "1 -1"
        assert not plane_model[6].is_valid((1, 1, 1))

    def test_simplify_logs_removed_cell(self, plane_model, caplog):
        import logging

        plane_model.add_cell("1 -1", cell_id=4)
        with caplog.at_level(logging.WARNING, logger="csgtrack"):
            plane_model.simplify()
        assert "Cell 4 is empty" in caplog.text

    def test_validate_clean(self, slab_model):
        assert slab_model.validate() == []

    def test_validate_issues(self, plane_model):
        import csgtrack as ct

        plane_model.add_surface(3, ct.ZPlane(0.0))
        plane_model.add_cell("1 -1")
        plane_model.add_cell("")
        plane_model.add_cell("2")
        issues = plane_model.validate()
        assert "Cell 1 is empty" in issues
        assert "Cell 2 has no bounding surfaces" in issues
        assert "Surface 3 is not used by any cell" in issues
        assert len(issues) == 3


class TestSampling:
    """numpy-backed sampling queries."""

    def test_estimate_volumes(self, sphere_model):
        import math

        volumes = sphere_model.estimate_cell_volumes(
            n_points=20000, bounds=(-5, 5, -5, 5, -5, 5), seed=1)
        sphere = 4.0 / 3.0 * math.pi * 125.0
        assert volumes[2] == pytest.approx(sphere, rel=0.05)
        assert volumes[1] + volumes[2] == pytest.approx(1000.0)

    def test_estimate_is_reproducible(self, sphere_model):
        bounds = (-6, 6, -6, 6, -6, 6)
        a = sphere_model.estimate_cell_volumes(2000, bounds, seed=3)
        b = sphere_model.estimate_cell_volumes(2000, bounds, seed=3)
        assert a == b

    def test_estimate_bad_arguments(self, sphere_model):
        with pytest.raises(ValueError):
            sphere_model.estimate_cell_volumes(100)
        with pytest.raises(ValueError):
            sphere_model.estimate_cell_volumes(100, bounds=(0, 0, 0, 1, 0, 1))

    def test_sample_mesh(self, slab_model):
        result = slab_model.sample_mesh((-12, 12, -1, 1, -1, 1),
                                        shape=(8, 1, 1), outside=-1)
        assert result['shape'] == (8, 1, 1)
        assert result['cell_ids'].shape == (8, 1, 1)
        assert list(result['cell_ids'][:, 0, 0]) == [-1, 1, 2, 2, 2, 2, 1, -1]
        assert result['materials'][3, 0, 0] == "fuel"
        assert result['materials'][0, 0, 0] == -1
        assert list(result['x']) == pytest.approx([-10.5, -7.5, -4.5, -1.5,
                                             1.5, 4.5, 7.5, 10.5])


class TestConfig:
    """Model.config dict getter/setter."""

    def test_defaults(self, sphere_model):
        config = sphere_model.config
        assert config['zero_tol'] == 1e-6
        assert config['max_literals'] == 12
        assert config['max_track_steps'] == 100000

    def test_update(self, sphere_model):
        sphere_model.config = {'zero_tol': 1e-8}
        assert sphere_model.config['zero_tol'] == 1e-8
        assert sphere_model.registry.config.zero_tol == 1e-8

    def test_unknown_key(self, sphere_model):
        with pytest.raises(KeyError):
            sphere_model.config = {'no_such_setting': 1}

    def test_bad_value_rolls_back(self, sphere_model):
        with pytest.raises(ValueError):
            sphere_model.config = {'max_literals': 4, 'probe_step': -1.0}
        assert sphere_model.config['max_literals'] == 12
        assert sphere_model.config['probe_step'] == 1e-5

    def test_config_object(self):
        from csgtrack import Config, Model

        config = Config(max_literals=4)
        model = Model(config=config)
        assert model.config['max_literals'] == 4
        with pytest.raises(ValueError):
            Config(zero_tol=0)

    def test_repr(self, sphere_model):
        assert str(sphere_model) == "Model: 2 cells, 1 surfaces"
        assert "Sphere Model" in repr(sphere_model)
