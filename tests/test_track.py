import json

from routewatch.tracking.track import AircraftTrack


def test_track_grows_only_on_movement():
    track = AircraftTrack(capacity=120, stuck_threshold=10)
    track.push(50.0, 1.0)
    track.push(50.0, 1.0)
    track.push(50.1, 1.0)
    assert len(track) == 2
    assert track.repeat_count == 0


def test_capacity_evicts_oldest():
    track = AircraftTrack(capacity=120, stuck_threshold=10)
    for i in range(120):
        track.push(0.0, i * 0.01)
    assert len(track) == 120
    assert track.waypoints[0].lon == 0.0

    track.push(1.0, 1.0)
    assert len(track) == 120
    assert track.waypoints[0].lon == 0.01
    assert track.waypoints[-1].lat == 1.0


def test_stuck_boundary():
    track = AircraftTrack(capacity=120, stuck_threshold=10)
    assert track.push(50.0, 1.0) is False
    for _ in range(10):
        assert track.push(50.0, 1.0) is False
    assert track.push(50.0, 1.0) is True
    assert len(track) == 1


def test_movement_clears_stuck():
    track = AircraftTrack(capacity=120, stuck_threshold=10)
    for _ in range(15):
        track.push(50.0, 1.0)
    assert track.stuck
    assert track.push(50.0, 1.1) is False


def test_loop_detection_and_json_snapshot():
    track = AircraftTrack(capacity=120, stuck_threshold=10)
    for lat, lon in ((0, 0), (1, 1), (0, 1), (1, 0)):
        track.push(lat, lon)
    assert track.has_loop()

    snapshot = json.loads(track.to_json())
    assert snapshot[0] == {'id': 'unknown', 'lat': 0, 'lon': 0}
    assert len(snapshot) == 4


def test_explicit_capacity_is_respected():
    track = AircraftTrack(capacity=2, stuck_threshold=0)
    for lon in (0.0, 1.0, 2.0):
        track.push(0.0, lon)
    assert len(track) == 2
    assert track.capacity == 2

    assert track.push(0.0, 2.0) is True
    assert AircraftTrack(capacity=0, stuck_threshold=10).capacity == 0
