"""Tests for stop assembly, metrics and warnings."""

import pytest

from route_optimizer import RouteSettings, optimize


def _warning_types(result):
    return {w.type for w in result.warnings}


def test_late_finish_warning(make_place, hotel):
    """A route ending after 20:00 is flagged."""
    places = [
        make_place(1, 11.070, 77.060, 60),
        make_place(2, 11.060, 77.070, 60),
    ]
    result = optimize(places, hotel, RouteSettings(start_time=19 * 60))
    assert result.feasible
    assert "LATE_FINISH" in _warning_types(result)


def test_incomplete_route_warning(make_place, hotel):
    """Skips are flagged and carry a reason."""
    places = [make_place(i, 11.06 + 0.01 * i, 77.06, 120) for i in range(1, 5)]
    result = optimize(places, hotel, RouteSettings(total_time_available=150))
    assert result.metrics.places_skipped > 0
    assert "INCOMPLETE_ROUTE" in _warning_types(result)
    skipped = [s for s in result.route if s.skipped]
    assert all(s.skip_reason for s in skipped)
    assert all(s.visit_duration == 0 for s in skipped)


def test_high_travel_warning(make_place, hotel):
    """Travel-dominated routes are flagged."""
    places = [
        make_place(1, hotel.latitude + 0.1, hotel.longitude, 5),
        make_place(2, hotel.latitude + 0.1, hotel.longitude + 0.1, 5),
    ]
    result = optimize(places, hotel, RouteSettings())
    assert "HIGH_TRAVEL_TIME" in _warning_types(result)


def test_no_warnings_for_comfortable_route(make_place, hotel):
    """A relaxed route has no warnings."""
    places = [make_place(1, 11.065, 77.061, 120), make_place(2, 11.062, 77.058, 120)]
    result = optimize(places, hotel, RouteSettings())
    assert result.warnings == ()


def test_stop_fields(city_places, hotel):
    """The start is stop 0 and the last stop has no onward leg."""
    result = optimize(city_places, hotel, RouteSettings(total_time_available=600))
    start = result.route[0]
    assert start.is_start and start.visited and not start.skipped
    assert start.arrival_time == start.departure_time == "09:00"
    last = result.route[-1]
    assert last.travel_time_to_next == 0
    assert last.travel_distance_to_next == 0
    for stop in result.itinerary:
        assert stop.departure >= stop.arrival + stop.visit_duration
        assert stop.wait_time >= 0


def test_metrics_summary(city_places, hotel):
    """Efficiency, categories and average rating agree with the stops."""
    result = optimize(city_places, hotel, RouteSettings(total_time_available=600))
    m = result.metrics
    assert 0 <= m.efficiency <= 100
    assert sum(m.category_distribution.values()) == m.places_visited
    ratings = [p.rating for p in city_places if p.id in {s.place_id for s in result.itinerary}]
    assert m.average_rating == pytest.approx(sum(ratings) / len(ratings), abs=0.01)
    assert m.estimated_end_time == result.route[-1].departure_time


def test_to_dict_keys(city_places, hotel):
    """Stops serialize with camelCase keys."""
    data = optimize(city_places, hotel, RouteSettings()).to_dict()
    stop = data["route"][1]
    for key in ("placeId", "arrivalTime", "departureTime", "visitDuration",
                "travelTimeToNext", "travelDistanceToNext", "skipReason", "location"):
        assert key in stop
    assert set(data["metrics"]["categoryDistribution"]) <= {p.category for p in city_places}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
