import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from gpxtrack.core.models.locate_models import LocatePhase, LocateRequest
from gpxtrack.core.usecases.locate_times import LocateTimesUseCase
from gpxtrack.domain.errors import InsufficientData
from gpxtrack.domain.gps_types import Location, Track, Waypoint
from gpxtrack.services.track_controller import TrackController


EPOCH = datetime(2011, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

GPX = b"""\
<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg>
    <trkpt lat="1" lon="1"><time>2011-06-01T12:01:40Z</time></trkpt>
    <trkpt lat="2" lon="2"><time>2011-06-01T12:03:20Z</time></trkpt>
    <trkpt lat="3" lon="3"><time>2011-06-01T12:05:00Z</time></trkpt>
    <trkpt lat="4"><time>2011-06-01T12:06:00Z</time></trkpt>
  </trkseg></trk>
</gpx>
"""


class _FakeTrackSync:
    def __init__(self, points=3):
        self.track = Track("fake", tuple(
            Waypoint(longitude=float(i), latitude=float(i), timestamp=EPOCH + timedelta(seconds=100 * i))
            for i in range(1, points + 1)
        ))
        self.queries = []

    def locate(self, query_time):
        self.queries.append(query_time)
        if len(self.track) < 2:
            raise InsufficientData("pas assez de points")
        return Location(9.0, 9.0, True)


class _Recorder:
    def __init__(self):
        self.events = []

    def report(self, event):
        self.events.append(event)


class LocateTimesUseCaseTests(unittest.TestCase):
    def test_offset_and_progress(self):
        sync = _FakeTrackSync()
        recorder = _Recorder()
        request = LocateRequest(times=(EPOCH, datetime(2011, 6, 1, 12, 0, 0)), offset_seconds=30)

        result = LocateTimesUseCase(track_sync=sync).execute(request, reporter=recorder)

        self.assertIs(result.track, sync.track)
        self.assertEqual([loc.time for loc in result.locations], [EPOCH + timedelta(seconds=30)] * 2)
        self.assertEqual(sync.queries, [EPOCH + timedelta(seconds=30)] * 2)
        self.assertTrue(all(loc.is_located() for loc in result.locations))
        self.assertEqual(
            [(e.phase, e.current, e.total) for e in recorder.events],
            [
                (LocatePhase.LOCATE_TIME, 1, 2),
                (LocatePhase.LOCATE_TIME, 2, 2),
                (LocatePhase.DONE, 2, 2),
            ],
        )
        self.assertEqual({e.phase for e in recorder.events}, set(LocatePhase))

    def test_insufficient_track_gives_no_location(self):
        result = LocateTimesUseCase(track_sync=_FakeTrackSync(points=1)).execute(
            LocateRequest(times=(EPOCH,))
        )
        self.assertEqual(len(result.locations), 1)
        self.assertIsNone(result.locations[0].location)
        self.assertFalse(result.locations[0].is_located())

    def test_no_times(self):
        recorder = _Recorder()
        result = LocateTimesUseCase(track_sync=_FakeTrackSync()).execute(LocateRequest(), recorder)
        self.assertEqual(result.locations, [])
        self.assertEqual([e.phase for e in recorder.events], [LocatePhase.DONE])


class TrackControllerTests(unittest.TestCase):
    def setUp(self):
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.path = os.path.join(tmpdir.name, "sortie.gpx")
        with open(self.path, "wb") as f:
            f.write(GPX)
        self.broken_path = os.path.join(tmpdir.name, "casse.gpx")
        with open(self.broken_path, "wb") as f:
            f.write(GPX[:80])

    def test_load_and_locate(self):
        controller = TrackController()
        self.assertTrue(controller.load_gpx_file(self.path))
        self.assertTrue(controller.has_track())
        self.assertEqual(len(controller.get_track()), 3)
        self.assertEqual(len(controller.get_warnings()), 1)
        self.assertEqual(controller.locate(EPOCH + timedelta(seconds=150)), Location(1.0, 1.0, True))

    def test_locate_many_and_summary(self):
        controller = TrackController()
        controller.load_gpx_file(self.path)
        calls = []
        times = [EPOCH + timedelta(seconds=s) for s in (50, 150, 250, 400)]

        locations = controller.locate_many(times, progress_callback=lambda c, t: calls.append((c, t)))

        self.assertEqual(
            [loc.location for loc in locations],
            [(1.0, 1.0, False), (1.0, 1.0, True), (2.0, 2.0, True), (3.0, 3.0, False)],
        )
        self.assertEqual(calls[0], (1, 4))
        self.assertEqual(calls[-1], (4, 4))
        summary = controller.get_summary()
        self.assertEqual(summary["track_points"], 3)
        self.assertEqual(summary["warnings"], 1)
        self.assertEqual(summary["total_times"], 4)
        self.assertEqual(summary["located_times"], 2)
        self.assertEqual(summary["out_of_range"], 2)

    def test_load_broken_file(self):
        controller = TrackController()
        with self.assertLogs("gpxtrack.services.track_controller", level="ERROR"):
            self.assertFalse(controller.load_gpx_file(self.broken_path))
        self.assertFalse(controller.has_track())
        self.assertIsNone(controller.locate(EPOCH))
        self.assertEqual(controller.get_summary()["track_points"], 0)

    def test_nothing_loaded(self):
        controller = TrackController()
        self.assertEqual(controller.get_warnings(), ())
        self.assertEqual(controller.locate_many([EPOCH]), [])


if __name__ == "__main__":
    unittest.main()
