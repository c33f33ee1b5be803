import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "surface"))

from glyphgrid_surface import CancelToken, ManualHost, RealtimeHost


class FakeClock:
    def __init__(self):
        self.t = 0.0

    def clock(self):
        return self.t

    def sleep(self, seconds):
        self.t += seconds


class ManualHostTests(unittest.TestCase):
    def test_dispatches_with_virtual_time(self):
        host = ManualHost(start_ms=100)
        seen = []
        host.request_frame(seen.append)
        host.tick(16)
        host.tick(16)
        self.assertEqual(seen, [116.0])
        self.assertEqual(host.now, 132.0)

    def test_cancel_frame(self):
        host = ManualHost()
        seen = []
        handle = host.request_frame(seen.append)
        host.cancel_frame(handle)
        host.tick()
        self.assertEqual(seen, [])
        self.assertEqual(host.pending, 0)

    def test_callback_requested_during_dispatch_runs_next_tick(self):
        host = ManualHost()
        seen = []

        def again(ts):
            seen.append(ts)
            host.request_frame(seen.append)

        host.request_frame(again)
        host.tick(10)
        self.assertEqual(seen, [10.0])
        host.tick(10)
        self.assertEqual(seen, [10.0, 20.0])

    def test_font_waiters(self):
        host = ManualHost(fonts_loaded=False)
        calls = []
        host.when_fonts_ready(lambda: calls.append("a"))
        self.assertEqual(calls, [])
        host.load_fonts()
        host.when_fonts_ready(lambda: calls.append("b"))
        self.assertEqual(calls, ["a", "b"])

    def test_advance_counts_ticks(self):
        host = ManualHost()
        self.assertEqual(host.advance(100, 10), 10)
        self.assertAlmostEqual(host.now, 100.0)


class RealtimeHostTests(unittest.TestCase):
    def test_runs_until_idle(self):
        fake = FakeClock()
        host = RealtimeHost(refresh_hz=10, clock=fake.clock, sleep=fake.sleep)
        stamps = []

        def frame(ts):
            stamps.append(ts)
            if len(stamps) < 3:
                host.request_frame(frame)

        host.request_frame(frame)
        self.assertEqual(host.run(), 3)
        self.assertEqual(len(stamps), 3)
        for got, want in zip(stamps, (100.0, 200.0, 300.0)):
            self.assertAlmostEqual(got, want)

    def test_stops_at_deadline(self):
        fake = FakeClock()
        host = RealtimeHost(refresh_hz=10, clock=fake.clock, sleep=fake.sleep)

        def forever(_ts):
            host.request_frame(forever)

        host.request_frame(forever)
        count = host.run(max_seconds=0.35)
        self.assertGreaterEqual(count, 3)
        self.assertLessEqual(count, 4)
        self.assertEqual(host.pending, 1)

    def test_stops_on_cancel(self):
        fake = FakeClock()
        host = RealtimeHost(refresh_hz=10, clock=fake.clock, sleep=fake.sleep)
        token = CancelToken()
        seen = []

        def frame(ts):
            seen.append(ts)
            if len(seen) == 2:
                token.cancel()
            host.request_frame(frame)

        host.request_frame(frame)
        self.assertEqual(host.run(token=token), 2)

    def test_rejects_bad_refresh_rate(self):
        with self.assertRaises(ValueError):
            RealtimeHost(refresh_hz=0)


class CancelTokenTests(unittest.TestCase):
    def test_callbacks_run_once(self):
        token = CancelToken()
        calls = []
        token.on_cancel(lambda: calls.append(1))
        token.cancel()
        token.cancel()
        self.assertTrue(token.cancelled)
        self.assertEqual(calls, [1])

    def test_late_callback_runs_immediately(self):
        token = CancelToken()
        token.cancel()
        calls = []
        token.on_cancel(lambda: calls.append(1))
        self.assertEqual(calls, [1])


if __name__ == "__main__":
    unittest.main()
