# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

"""Tests for line tracking through a model."""

import pytest


class TestSphereTrack:
    """Straight line through a single sphere."""

    def test_cells_and_lengths(self, sphere_model):
        from csgtrack import LineTrack, TrackState

        track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(sphere_model)

        assert track.state is TrackState.COMPLETE
        assert track.get_cells() == [1, 2, 1]
        assert [seg.material for seg in track] == [0, "A", 0]
        assert track.get_lengths() == pytest.approx([5.0, 10.0, 5.0])
        assert sum(track.get_lengths()) == pytest.approx(20.0)
        assert track.total_distance == pytest.approx(20.0)

    def test_crossing_points(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(sphere_model)
        segments = track.get_track()

        assert isinstance(segments, tuple)
        assert -10 + segments[0].t_exit == pytest.approx(-5.0)
        assert -10 + segments[1].t_exit == pytest.approx(5.0)
        assert track.get_surfaces() == [0, -1, 1]
        assert [seg.surface_out for seg in segments] == [-1, 1, 0]

    def test_path_length_by_material(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(sphere_model)
        assert track.path_length("A") == pytest.approx(10.0)
        assert track.path_length(0) == pytest.approx(10.0)
        assert track.path_length() == pytest.approx(20.0)
        assert track.materials_hit() == {0, "A"}

    def test_ends_inside_cell(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (0, 0, 0)).calculate(sphere_model)
        assert track.get_cells() == [1, 2]
        assert track.get_lengths() == pytest.approx([5.0, 5.0])

    def test_oblique_track(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((0, -10, 3), (0, 10, 3)).calculate(sphere_model)
        assert track.get_cells() == [1, 2, 1]
        assert track.get_lengths() == pytest.approx([6.0, 8.0, 6.0])

    def test_missing_the_sphere(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 6, 0), (10, 6, 0)).calculate(sphere_model)
        assert track.get_cells() == [1]
        assert track.get_lengths() == pytest.approx([20.0])

    def test_end_within_a_step_of_boundary(self, sphere_model):
        """A crossing closer to the end than min_track_step ends the track."""
        from csgtrack import LineTrack, TrackState

        track = LineTrack((-10, 0, 0), (-5 + 5e-6, 0, 0)).calculate(sphere_model)
        assert track.state is TrackState.COMPLETE
        assert track.get_cells() == [1]
        assert track[0].t_exit == pytest.approx(5.0 + 5e-6)

    @pytest.mark.parametrize("y", [5.0, 5.0 - 1e-12])
    def test_grazing_the_sphere(self, sphere_model, y):
        """Tangent and near-tangent rays stay in the outer cell."""
        from csgtrack import LineTrack, TrackState

        track = LineTrack((-10, y, 0), (10, y, 0)).calculate(sphere_model)
        assert track.state is TrackState.COMPLETE
        assert track.get_cells() == [1]
        assert track.get_lengths() == pytest.approx([20.0])
        assert track.path_length("A") == 0.0

    def test_sequence_protocol(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(sphere_model)
        assert len(track) == 3
        assert track[1].cell_id == 2
        assert [seg.cell_id for seg in track[1:]] == [2, 1]
        assert "3 segments" in repr(track)

    def test_recalculate_resets(self, sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (10, 0, 0))
        track.calculate(sphere_model)
        track.calculate(sphere_model)
        assert len(track) == 3


class TestSplitTrack:
    def test_four_segments(self, split_sphere_model):
        from csgtrack import LineTrack

        track = LineTrack((-10, 0, 0), (10, 0, 0)).calculate(split_sphere_model)
        assert track.get_cells() == [1, 2, 3, 1]
        assert track.get_lengths() == pytest.approx([5.0, 5.0, 5.0, 5.0])
        assert track.get_surfaces() == [0, -1, 2, 1]

    def test_from_direction(self, split_sphere_model):
        from csgtrack import LineTrack

        track = LineTrack.from_direction((10, 0, 0), (-3, 0, 0), 20.0)
        track.calculate(split_sphere_model)
        assert track.get_cells() == [1, 3, 2, 1]
        assert track.end == pytest.approx((-10.0, 0.0, 0.0))


class TestConstruction:
    def test_zero_direction(self):
        from csgtrack import LineTrack

        with pytest.raises(ValueError):
            LineTrack.from_direction((0, 0, 0), (0, 0, 0), 5.0)

    def test_nonpositive_distance(self):
        from csgtrack import LineTrack

        with pytest.raises(ValueError):
            LineTrack.from_direction((0, 0, 0), (1, 0, 0), 0.0)

    def test_coincident_points(self):
        from csgtrack import LineTrack

        with pytest.raises(ValueError):
            LineTrack((1, 2, 3), (1, 2, 3))

    def test_direction_normalized(self):
        from csgtrack import LineTrack, TrackState

        track = LineTrack((0, 0, 0), (0, 3, 4))
        assert track.direction == pytest.approx((0.0, 0.6, 0.8))
        assert track.total_distance == pytest.approx(5.0)
        assert track.state is TrackState.TRACKING


class TestTrackErrors:
    """Failure modes of calculate()."""

    def test_start_outside_model(self, slab_model):
        from csgtrack import LineTrack, StartNotInAnyCellError

        with pytest.raises(StartNotInAnyCellError) as info:
            LineTrack((20, 0, 0), (30, 0, 0)).calculate(slab_model)
        assert info.value.candidates == []

    def test_start_on_shared_boundary(self, sphere_model):
        from csgtrack import LineTrack, StartNotInAnyCellError

        with pytest.raises(StartNotInAnyCellError) as info:
            LineTrack((5, 0, 0), (10, 0, 0)).calculate(sphere_model)
        assert sorted(c.id for c in info.value.candidates) == [1, 2]

    def test_leaving_the_model(self, slab_model):
        """Partial segments are kept when no cell lies beyond x = 10."""
        from csgtrack import IncompleteTrackError, LineTrack, TrackState

        track = LineTrack((-8, 0, 0), (20, 0, 0))
        with pytest.raises(IncompleteTrackError) as info:
            track.calculate(slab_model)

        assert track.state is TrackState.FAILED
        segments = info.value.segments
        assert [seg.cell_id for seg in segments] == [1, 2, 1]
        assert [seg.length for seg in segments] == pytest.approx([3.0, 10.0, 5.0])
        assert segments[-1].surface_out == 2

    def test_ambiguous_neighbor(self):
        import csgtrack as ct

        model = ct.Model()
        model.add_surface(1, ct.Sphere(0, 0, 0, radius=5.0))
        model.add_cell("1")
        model.add_cell("-1", material="A")
        model.add_cell("-1", material="B")

        track = ct.LineTrack((-10, 0, 0), (10, 0, 0))
        with pytest.raises(ct.AmbiguousNeighborError):
            track.calculate(model)
        assert track.state is ct.TrackState.FAILED

    def test_step_limit(self, sphere_model):
        from csgtrack import IncompleteTrackError, LineTrack

        sphere_model.config = {'max_track_steps': 2}
        with pytest.raises(IncompleteTrackError) as info:
            LineTrack((-10, 0, 0), (10, 0, 0)).calculate(sphere_model)
        assert len(info.value.segments) == 2
