"""Tests for adjacency spacing extraction and nearest-neighbour fallback."""

import pytest

from siteplace.layout.spacing import (
    SpacingMeasurement,
    deduplicate_measurements,
    extract_adjacent_spacing,
    find_nearest_fallbacks,
    is_duplicate,
)
from siteplace.rules.profiles import SITE_STANDARD


def measurement(a, b, distance, midpoint, start=None, end=None, axis="x"):
    """Build a measurement with far-apart default endpoints."""
    return SpacingMeasurement(
        object_a=a,
        object_b=b,
        axis=axis,
        distance=distance,
        midpoint=midpoint,
        start=start or (midpoint[0] - 100, midpoint[1]),
        end=end or (midpoint[0] + 100, midpoint[1]),
    )


class TestAdjacentSpacing:
    """Tests for the adjacency spacing extractor."""

    def test_four_containers(self, four_containers):
        """Facing containers yield X gaps along rows and Z gaps along columns."""
        result = extract_adjacent_spacing(four_containers)

        x_gaps = [m for m in result if m.axis == "x"]
        z_gaps = [m for m in result if m.axis == "z"]

        assert len(x_gaps) == 2
        assert {m.pair for m in x_gaps} == {("C1", "C3"), ("C2", "C4")}
        for m in x_gaps:
            assert m.distance == pytest.approx(20 - 12.192)

        assert len(z_gaps) == 2
        assert {m.pair for m in z_gaps} == {("C1", "C2"), ("C3", "C4")}
        for m in z_gaps:
            assert m.distance == pytest.approx(10 - 2.438)

    def test_diagonal_pairs_not_measured(self, four_containers):
        """Diagonally offset containers never get an adjacency gap."""
        result = extract_adjacent_spacing(four_containers)

        for m in result:
            assert not m.same_pair("C1", "C4")
            assert not m.same_pair("C2", "C3")

    def test_x_gap_geometry(self, make_object):
        """Endpoints sit on the facing edges at the shared Z midpoint."""
        objects = [
            make_object("B", "pdu", 10.0, 1.0, width=2000, depth=4000),
            make_object("A", "pdu", 0.0, 0.0, width=2000, depth=2000),
        ]

        [m] = extract_adjacent_spacing(objects)

        # Ordered left to right regardless of input order
        assert m.pair == ("A", "B")
        assert m.axis == "x"
        assert m.distance == pytest.approx(8.0)
        # Shared Z span is [-1, 1]
        assert m.start == pytest.approx((1.0, 0.0))
        assert m.end == pytest.approx((9.0, 0.0))
        assert m.midpoint == pytest.approx((5.0, 0.0))

    def test_z_gap_geometry(self, make_object):
        """Z gaps are measured between the near and far edges."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0, width=4000, depth=2000),
            make_object("B", "pdu", 1.0, 6.0, width=2000, depth=2000),
        ]

        [m] = extract_adjacent_spacing(objects)

        assert m.axis == "z"
        assert m.distance == pytest.approx(4.0)
        # Shared X span is [0, 2]
        assert m.midpoint == pytest.approx((1.0, 3.0))

    def test_symmetric_in_input_order(self, four_containers):
        """Reversing the input gives the same distances."""
        forward = extract_adjacent_spacing(four_containers)
        backward = extract_adjacent_spacing(list(reversed(four_containers)))

        assert [m.distance for m in forward] == pytest.approx([m.distance for m in backward])

    def test_small_gaps_not_reported(self, make_object):
        """Gaps of 0.2m or less are treated as touching."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 2.15, 0.0),  # gap 0.15
            make_object("C", "pdu", 0.0, 3.0),   # z gap 1.0
        ]

        result = extract_adjacent_spacing(objects)

        assert all(m.distance > SITE_STANDARD.min_reported_gap for m in result)
        assert not any(m.same_pair("A", "B") for m in result)

    def test_gap_just_above_minimum_reported(self, make_object):
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 2.3, 0.0),
        ]

        [m] = extract_adjacent_spacing(objects)

        assert m.distance == pytest.approx(0.3)

    def test_overlapping_objects_not_reported(self, make_object):
        """Intersecting footprints have no gap on either axis."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 1.0, 1.0),
        ]

        assert extract_adjacent_spacing(objects) == []

    def test_long_range_gaps_dropped(self, make_object):
        """Gaps of 30m or more are irrelevant."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 32.0, 0.0),   # gap 30
            make_object("C", "pdu", 0.0, 31.9),   # gap 29.9
        ]

        result = extract_adjacent_spacing(objects)

        assert [m.pair for m in result] == [("A", "C")]

    def test_sorted_ascending(self, power_chain):
        """Results come back sorted by distance."""
        result = extract_adjacent_spacing(power_chain)
        distances = [m.distance for m in result]

        assert distances == sorted(distances)
        assert distances == pytest.approx(
            [4.6, 5.562, 6.381, 11.781, 14.381, 19.781, 25.562]
        )

    def test_stacked_duplicates_removed(self, make_container):
        """Two containers at the same spot produce one gap to a neighbour."""
        objects = [
            make_container("C1", 0.0, 0.0),
            make_container("C1b", 0.0, 0.0),
            make_container("C3", 20.0, 0.0),
        ]

        result = extract_adjacent_spacing(objects)

        # First found survives
        assert [m.pair for m in result] == [("C1", "C3")]

    def test_degenerate_footprints_skipped(self, make_container, make_object):
        """Zero-area objects never produce adjacency gaps."""
        objects = [
            make_container("C1", 0.0, 0.0),
            make_object("M1", "marker", 10.0, 0.0, width=0, depth=0),
        ]

        assert extract_adjacent_spacing(objects) == []

    def test_empty_and_single(self, single_container):
        assert extract_adjacent_spacing([]) == []
        assert extract_adjacent_spacing([single_container]) == []


class TestDeduplication:
    """Tests for measurement deduplication."""

    def test_close_midpoint_and_distance(self):
        """Nearby midpoints with similar lengths are duplicates."""
        m1 = measurement("A", "B", 5.0, (0.0, 0.0))
        m2 = measurement("C", "D", 5.4, (1.5, -1.9))

        assert is_duplicate(m1, m2)

    def test_distance_difference_at_tolerance(self):
        """A 0.5m length difference is not a duplicate."""
        m1 = measurement("A", "B", 5.0, (0.0, 0.0))
        m2 = measurement("C", "D", 5.5, (0.0, 0.0),
                         start=(0.0, -50.0), end=(0.0, 50.0))

        assert not is_duplicate(m1, m2)

    @pytest.mark.parametrize("offset,duplicate", [
        ((1.99, 0.0), True),
        ((0.0, 1.99), True),
        ((2.0, 0.0), False),
        ((0.0, 2.0), False),
    ])
    def test_midpoint_tolerance_is_exclusive(self, offset, duplicate):
        """Midpoints exactly 2m apart on either axis are distinct gaps."""
        m1 = measurement("A", "B", 5.0, (0.0, 0.0), start=(0.0, -40.0), end=(0.0, 40.0))
        m2 = measurement("C", "D", 5.0, offset)

        assert is_duplicate(m1, m2) == duplicate

    def test_reversed_endpoints(self):
        """Endpoint pairs matching in reverse order are duplicates."""
        m1 = measurement("A", "B", 5.0, (0.0, 2.5), start=(0.0, 0.0), end=(0.0, 5.0))
        m2 = measurement("B", "A", 6.0, (0.0, 10.0), start=(0.3, 5.2), end=(0.1, -0.2))

        assert is_duplicate(m1, m2)

    def test_first_found_survives(self):
        m1 = measurement("A", "B", 5.0, (0.0, 0.0))
        m2 = measurement("C", "D", 5.1, (0.5, 0.5))
        m3 = measurement("E", "F", 9.0, (50.0, 50.0))

        result = deduplicate_measurements([m1, m2, m3])

        assert result == [m1, m3]

    def test_idempotent(self, power_chain, four_containers):
        """A second pass removes nothing further."""
        for objects in (power_chain, four_containers):
            once = extract_adjacent_spacing(objects)
            assert deduplicate_measurements(once) == once


class TestNearestFallback:
    """Tests for nearest-neighbour fallback pairs."""

    def test_diagonal_objects_get_fallback(self, make_object):
        """Objects with no facing neighbour are paired once."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 5.0, 5.0),
        ]
        adjacent = extract_adjacent_spacing(objects)

        fallbacks = find_nearest_fallbacks(objects, adjacent)

        assert adjacent == []
        assert len(fallbacks) == 1
        assert fallbacks[0].pair == ("A", "B")
        assert fallbacks[0].axis is None
        assert fallbacks[0].distance == pytest.approx(50 ** 0.5)
        assert fallbacks[0].midpoint == pytest.approx((2.5, 2.5))

    def test_distance_limit_is_exclusive(self, make_object):
        """Neighbours at exactly 25m are too far."""
        at_limit = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 15.0, 20.0),
        ]
        inside = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 15.0, 19.9),
        ]

        assert find_nearest_fallbacks(at_limit, []) == []
        assert len(find_nearest_fallbacks(inside, [])) == 1

    def test_covered_objects_skipped(self, four_containers):
        """Objects with adjacency gaps get no fallback."""
        adjacent = extract_adjacent_spacing(four_containers)

        assert find_nearest_fallbacks(four_containers, adjacent) == []

    def test_uncovered_object_pairs_with_covered_neighbour(self, make_object):
        """The nearest neighbour may itself have adjacency gaps."""
        objects = [
            make_object("A", "pdu", 0.0, 0.0),
            make_object("B", "pdu", 5.0, 0.0),
            make_object("C", "pdu", 8.0, 4.0),
        ]
        adjacent = extract_adjacent_spacing(objects)

        fallbacks = find_nearest_fallbacks(objects, adjacent)

        assert [m.pair for m in adjacent] == [("A", "B")]
        assert [m.pair for m in fallbacks] == [("C", "B")]
        assert fallbacks[0].distance == pytest.approx(5.0)

    def test_degenerate_object_reachable_by_fallback(self, make_container, make_object):
        """Zero-area objects still show up as nearest neighbours."""
        objects = [
            make_container("C1", 0.0, 0.0),
            make_object("M1", "marker", 10.0, 0.0, width=0, depth=0),
        ]

        fallbacks = find_nearest_fallbacks(objects, extract_adjacent_spacing(objects))

        assert [m.pair for m in fallbacks] == [("C1", "M1")]
        assert fallbacks[0].distance == pytest.approx(10.0)

    def test_fallback_symmetry(self, make_object):
        """Fallback distance does not depend on which side found the pair."""
        a = make_object("A", "pdu", 0.0, 0.0)
        b = make_object("B", "pdu", 6.0, 8.0)

        forward = find_nearest_fallbacks([a, b], [])
        backward = find_nearest_fallbacks([b, a], [])

        assert forward[0].distance == backward[0].distance == pytest.approx(10.0)

    def test_empty_and_single(self, single_container):
        assert find_nearest_fallbacks([], []) == []
        assert find_nearest_fallbacks([single_container], []) == []
