"""Tests for snapping alternates and side trips onto the main track."""

from __future__ import annotations

import pytest

from trail_enrichment.enrichment.junctions import (
    find_nearest_track_point,
    resolve_variant,
    resolve_variants,
)
from trail_enrichment.models import RawPoint, VariantInput, VariantKind

from track_factories import METERS_PER_DEGREE, make_track, meridian_track, north_of

MAIN = meridian_track([i * 100.0 for i in range(21)])


def _beside(
    track_index: int, meters_east: float = 50.0, elevation: float = 0.0
) -> RawPoint:
    lat, lon = north_of(0.0, 0.0, track_index * 100.0)
    return RawPoint(
        lat=lat, lon=lon + meters_east / METERS_PER_DEGREE, elevation=elevation
    )


def _variant(kind: VariantKind, *points: RawPoint) -> VariantInput:
    return VariantInput(name="Spur", kind=kind, points=tuple(points))


def test_branch_within_junction_distance_is_anchored() -> None:
    variant = _variant(VariantKind.ALTERNATE, _beside(3, 400.0), _beside(15))
    resolved = resolve_variant(variant, MAIN)

    assert resolved.branch_track_index == 3
    assert resolved.branch_distance_km == pytest.approx(0.3)
    assert resolved.rejoin_track_index == 15
    assert resolved.rejoin_distance_km == pytest.approx(1.5)


def test_branch_beyond_junction_distance_is_left_unanchored() -> None:
    variant = _variant(VariantKind.ALTERNATE, _beside(3, 600.0), _beside(15))
    resolved = resolve_variant(variant, MAIN)

    assert resolved.branch is None
    assert resolved.branch_track_index is None
    assert resolved.rejoin_track_index == 15


def test_short_side_trip_has_no_rejoin() -> None:
    variant = _variant(VariantKind.SIDE_TRIP, _beside(5), _beside(12))
    resolved = resolve_variant(variant, MAIN)

    assert resolved.branch_track_index == 5
    assert resolved.rejoin is None


@pytest.mark.parametrize("end_index", [15, 20])
def test_side_trip_returning_elsewhere_has_rejoin(end_index) -> None:
    variant = _variant(VariantKind.SIDE_TRIP, _beside(5), _beside(end_index))
    resolved = resolve_variant(variant, MAIN)

    assert resolved.branch_track_index == 5
    assert resolved.rejoin_track_index == end_index


def test_alternate_always_records_rejoin() -> None:
    variant = _variant(VariantKind.ALTERNATE, _beside(5), _beside(12))
    assert resolve_variant(variant, MAIN).rejoin_track_index == 12


def test_side_trip_span_uses_nearest_start_even_when_unanchored() -> None:
    variant = _variant(VariantKind.SIDE_TRIP, _beside(5, 600.0), _beside(8))
    resolved = resolve_variant(variant, MAIN)

    assert resolved.branch is None
    assert resolved.rejoin is None


def test_same_point_span_is_configurable() -> None:
    variant = _variant(VariantKind.SIDE_TRIP, _beside(5), _beside(12))
    resolved = resolve_variant(variant, MAIN, same_point_index_span=5)
    assert resolved.rejoin_track_index == 12


def test_variant_statistics_are_rounded() -> None:
    elevations = [10, 30, 20, 20, 50, 40, 45, 60]
    points = [_beside(i, elevation=e) for i, e in zip(range(5, 13), elevations)]
    resolved = resolve_variant(_variant(VariantKind.SIDE_TRIP, *points), MAIN)

    assert resolved.distance_km == pytest.approx(0.7)
    assert resolved.ascent_m == 70
    assert resolved.descent_m == 20
    assert isinstance(resolved.ascent_m, int)
    assert resolved.points == tuple(points)


def test_empty_variant_has_zero_stats_and_no_junctions() -> None:
    resolved = resolve_variant(_variant(VariantKind.ALTERNATE), MAIN)

    assert resolved.distance_km == 0.0
    assert (resolved.ascent_m, resolved.descent_m) == (0, 0)
    assert resolved.branch is None and resolved.rejoin is None


def test_empty_main_track_leaves_variant_unanchored() -> None:
    variant = _variant(VariantKind.ALTERNATE, _beside(0), _beside(3))
    resolved = resolve_variant(variant, [])

    assert resolved.branch is None and resolved.rejoin is None
    assert resolved.distance_km == pytest.approx(0.3)


def test_nearest_track_point_prefers_earliest_on_ties() -> None:
    track = make_track([(0, 0), (0, 0.001), (0, 0)])
    nearest = find_nearest_track_point(0.0, 0.0, track)

    assert nearest.track_index == 0
    assert nearest.distance_m == 0.0
    assert find_nearest_track_point(0.0, 0.0, []) is None


def test_resolve_variants_preserves_input_order() -> None:
    variants = [
        VariantInput("B", VariantKind.SIDE_TRIP, (_beside(2), _beside(18))),
        VariantInput("A", VariantKind.ALTERNATE, (_beside(1), _beside(4))),
    ]
    resolved = resolve_variants(variants, MAIN)
    assert [v.name for v in resolved] == ["B", "A"]
    assert [v.kind for v in resolved] == [VariantKind.SIDE_TRIP, VariantKind.ALTERNATE]
