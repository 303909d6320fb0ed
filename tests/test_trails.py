"""Tests for trail recording."""

from collections import deque

from gravsim.constants import MAX_TRAIL_POINTS
from gravsim.data_models import Body, BodyConfig
from gravsim.trails import TrailTracker


def make_body(x=0.0, y=0.0):
    return Body.from_config(1, BodyConfig(mass=10, x=x, y=y), radius=5.0)


class TestTrailTracker:

    def test_new_body_trail_starts_at_position(self):
        body = make_body(3, 4)
        assert list(body.trail) == [(3.0, 4.0)]
        assert body.trail.maxlen == MAX_TRAIL_POINTS

    def test_trail_is_bounded_fifo(self):
        """Oldest points are evicted once the bound is reached."""
        tracker = TrailTracker(max_points=5, min_distance=1.0)
        body = make_body()
        for i in range(1, 21):
            body.position = (2.0 * i, 0.0)
            tracker.record(body)

        assert len(body.trail) == 5
        assert list(body.trail) == [(32.0, 0.0), (34.0, 0.0), (36.0, 0.0), (38.0, 0.0), (40.0, 0.0)]

    def test_near_duplicate_points_are_skipped(self):
        tracker = TrailTracker(min_distance=1.0)
        body = make_body()

        body.position = (0.5, 0.0)
        assert tracker.record(body) is False
        body.position = (1.0, 0.0)
        assert tracker.record(body) is False
        body.position = (1.5, 0.0)
        assert tracker.record(body) is True
        assert list(body.trail) == [(0.0, 0.0), (1.5, 0.0)]

    def test_zero_min_distance_records_every_move(self):
        tracker = TrailTracker(min_distance=0.0)
        body = make_body()
        assert tracker.record(body) is False
        body.position = (0.01, 0.0)
        assert tracker.record(body) is True

    def test_reset_restarts_at_current_position(self):
        tracker = TrailTracker(max_points=10)
        body = make_body()
        for i in range(1, 6):
            body.position = (5.0 * i, 0.0)
            tracker.record(body)

        tracker.reset(body)

        assert list(body.trail) == [(25.0, 0.0)]
        assert body.trail.maxlen == 10

    def test_record_adopts_tracker_bound(self):
        tracker = TrailTracker(max_points=3)
        body = make_body()
        body.trail = deque([(float(i) * 10, 0.0) for i in range(10)], maxlen=200)
        body.position = (500.0, 0.0)

        tracker.record(body)

        assert body.trail.maxlen == 3
        assert list(body.trail) == [(80.0, 0.0), (90.0, 0.0), (500.0, 0.0)]

    def test_record_all(self):
        tracker = TrailTracker()
        bodies = [make_body(0, 0), make_body(100, 100)]
        for b in bodies:
            b.position = (b.position[0] + 5, b.position[1])
        tracker.record_all(bodies)
        assert [len(b.trail) for b in bodies] == [2, 2]


class TestControllerTrails:

    def test_trails_stay_bounded(self, running_controller):
        for _ in range(1000):
            bodies = running_controller.tick()
        assert all(len(b.trail) <= MAX_TRAIL_POINTS for b in bodies)

    def test_paused_ticks_record_nothing(self, controller):
        for _ in range(10):
            bodies = controller.tick()
        assert all(len(b.trail) == 1 for b in bodies)
