"""Tests for hysteresis-based waypoint visit detection."""

from __future__ import annotations

import pytest

from trail_enrichment.enrichment.waypoints import find_waypoint_visits
from trail_enrichment.models import Waypoint

from track_factories import meridian_track, north_of


def _waypoint(name: str, meters_north: float = 0.0) -> Waypoint:
    lat, lon = north_of(0.0, 0.0, meters_north)
    return Waypoint(name=name, lat=lat, lon=lon)


def test_switchback_inside_exit_radius_is_one_visit(origin_waypoint) -> None:
    track = meridian_track([1000, 100, 150, 50, 1000])
    visits = find_waypoint_visits([origin_waypoint], track, 200.0)

    assert [v.track_index for v in visits] == [3]
    assert visits[0].distance_from_track_m == pytest.approx(50.0)
    assert visits[0].waypoint is origin_waypoint


def test_leaving_beyond_exit_radius_starts_a_new_visit(origin_waypoint) -> None:
    track = meridian_track([1000, 100, 650, 50, 1000])
    visits = find_waypoint_visits([origin_waypoint], track, 200.0)

    assert [v.track_index for v in visits] == [1, 3]


def test_waypoint_never_within_entry_threshold_is_omitted(origin_waypoint) -> None:
    track = meridian_track([1000, 250, 300, 1000])
    assert find_waypoint_visits([origin_waypoint], track, 200.0) == []


def test_empty_inputs_produce_no_visits(origin_waypoint) -> None:
    assert find_waypoint_visits([], meridian_track([0, 100])) == []
    assert find_waypoint_visits([origin_waypoint], []) == []


def test_visit_still_active_at_track_end_is_flushed(origin_waypoint) -> None:
    track = meridian_track([1000, 100, 50])
    visits = find_waypoint_visits([origin_waypoint], track, 200.0)
    assert [v.track_index for v in visits] == [2]


def test_visits_are_returned_in_track_order() -> None:
    far = _waypoint("Far Camp", 2000.0)
    near = _waypoint("Near Hut", 0.0)
    track = meridian_track([i * 100.0 for i in range(31)])

    visits = find_waypoint_visits([far, near], track, 200.0)

    assert [v.waypoint.name for v in visits] == ["Near Hut", "Far Camp"]
    assert [v.track_index for v in visits] == [0, 20]


def test_out_and_back_visits_waypoint_twice() -> None:
    hut = _waypoint("Hut", 0.0)
    outbound = [i * 100.0 for i in range(11)]
    track = meridian_track(outbound + outbound[-2::-1])

    visits = find_waypoint_visits([hut], track, 200.0)

    assert [v.track_index for v in visits] == [0, 20]


def test_waypoints_sharing_a_location_keep_input_order() -> None:
    first = _waypoint("Hut", 0.0)
    second = _waypoint("Water Tank", 0.0)
    track = meridian_track([1000, 50, 1000])

    visits = find_waypoint_visits([first, second], track, 200.0)
    assert [v.waypoint.name for v in visits] == ["Hut", "Water Tank"]

    visits = find_waypoint_visits([second, first], track, 200.0)
    assert [v.waypoint.name for v in visits] == ["Water Tank", "Hut"]


def test_chunk_size_does_not_change_results() -> None:
    waypoints = [_waypoint(f"wp{i}", i * 350.0) for i in range(6)]
    outbound = [i * 50.0 for i in range(61)]
    track = meridian_track(outbound + outbound[-2::-1])

    whole = find_waypoint_visits(waypoints, track, 200.0)
    chunked = find_waypoint_visits(waypoints, track, 200.0, chunk_rows=1)
    odd = find_waypoint_visits(waypoints, track, 200.0, chunk_rows=7)

    assert whole == chunked == odd
    assert len(whole) == 2 * len(waypoints)
