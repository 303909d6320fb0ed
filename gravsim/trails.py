#!/usr/bin/env python3
"""
Bounded position history for drawing motion trails.

Each body's trail is a deque with maxlen set to the trail bound, so appending
past the bound evicts the oldest point (FIFO). The tracker only decides when a
point is worth keeping and when history must restart. It works with any
object that has a position tuple and a trail deque, so the rotation composite
uses it too.
"""
from collections import deque
from typing import Iterable

from .constants import MAX_TRAIL_POINTS, TRAIL_MIN_DISTANCE
from .data_models import Body, vec_len, vec_sub


class TrailTracker:
    """
    Append body positions to their trails, skipping near-duplicate points.

    A point is appended only if it lies strictly further than min_distance from
    the last recorded point. A min_distance of 0 records every distinct
    position.
    """

    def __init__(self, max_points: int = MAX_TRAIL_POINTS, min_distance: float = TRAIL_MIN_DISTANCE):
        self.max_points = max(1, int(max_points))
        self.min_distance = max(0.0, float(min_distance))

    def record(self, body: Body) -> bool:
        """Record the body's current position; return True if a point was added."""
        trail = body.trail
        if trail.maxlen != self.max_points:
            trail = body.trail = deque(trail, maxlen=self.max_points)
        if trail and vec_len(vec_sub(body.position, trail[-1])) <= self.min_distance:
            return False
        trail.append(body.position)
        return True

    def record_all(self, bodies: Iterable[Body]) -> None:
        for body in bodies:
            self.record(body)

    def reset(self, body: Body) -> None:
        """Restart the trail at the body's current position."""
        body.trail = deque([body.position], maxlen=self.max_points)
