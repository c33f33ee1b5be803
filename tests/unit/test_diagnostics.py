import json
import os
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "surface"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from glyphgrid_core import Runner
from glyphgrid_core.config import load_config
from glyphgrid_core.diagnostics import DiagnosticsExporter, build_doctor_payload, redact
from glyphgrid_surface import ManualHost


class DiagnosticsTests(unittest.TestCase):
    def setUp(self):
        self._home = tempfile.TemporaryDirectory()
        self._env = mock.patch.dict(os.environ, {"GLYPHGRID_HOME": self._home.name})
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._home.cleanup()

    def test_doctor_payload_shape(self):
        cfg = load_config(Path(self._home.name) / "missing.json")
        doctor = build_doctor_payload(cfg)
        self.assertEqual(doctor["renderers"], ["canvas", "text"])
        self.assertEqual(doctor["font"]["family"], "monospace")
        self.assertIn("resolved", doctor["font"])
        self.assertIn("pillow", doctor)
        self.assertEqual(doctor["config"]["run"]["renderer"], "text")
        self.assertIsInstance(doctor["freetype"], bool)
        metrics = doctor["metrics"]
        self.assertAlmostEqual(metrics["line_height"], 16.0 * 1.2)
        self.assertEqual(metrics["fit_rows"], int(480 // metrics["line_height"]))
        self.assertGreater(metrics["fit_cols"], 0)

    def test_doctor_reports_unmeasurable_style(self):
        cfg = load_config(Path(self._home.name) / "missing.json")
        cfg.style.line_height = 0
        self.assertIn("line height", build_doctor_payload(cfg)["metrics"]["error"])

    def test_bundle_exports_zip(self):
        cfg = load_config(Path(self._home.name) / "missing.json")
        doctor = build_doctor_payload(cfg)
        exporter = DiagnosticsExporter()
        events = [{"event": "boot", "frame": 0}, {"event": "hook_error", "auth_token": "abc"}]

        with tempfile.TemporaryDirectory() as tmp:
            bundle = exporter.bundle(cfg=cfg, doctor_payload=doctor, recent_runner_events=events, output_dir=Path(tmp))
            self.assertTrue(bundle.exists())

            with zipfile.ZipFile(bundle, "r") as zf:
                names = set(zf.namelist())
                self.assertIn("manifest.json", names)
                self.assertIn("doctor.json", names)
                self.assertIn("config.redacted.json", names)
                self.assertIn("runner_events.json", names)
                saved = json.loads(zf.read("runner_events.json"))
                self.assertEqual(saved[1]["auth_token"], "***REDACTED***")
                self.assertEqual(json.loads(zf.read("manifest.json"))["app"], "Glyphgrid")

    def test_bundle_includes_runner_status_and_events(self):
        cfg = load_config(Path(self._home.name) / "missing.json")
        host = ManualHost()
        runner = Runner({"main": lambda coord, context, cursor, buffer, user_vars: "x"}, {"cols": 2, "rows": 1, "once": True}, host=host)
        runner.start()
        host.advance(200, 40)

        with tempfile.TemporaryDirectory() as tmp:
            bundle = DiagnosticsExporter().bundle(cfg=cfg, doctor_payload={}, output_dir=Path(tmp), runner=runner)
            with zipfile.ZipFile(bundle, "r") as zf:
                status = json.loads(zf.read("runner_status.json"))
                events = json.loads(zf.read("runner_events.json"))

        self.assertEqual(status["state"], "Completed")
        self.assertEqual(status["errors"], 0)
        self.assertEqual(events[0]["event"], "start")
        self.assertEqual([e["event"] for e in events], [e["event"] for e in runner.recent_events()])

    def test_redact_nested(self):
        data = {"a": [{"password": "x", "ok": 1}], "api_key": "y"}
        self.assertEqual(redact(data), {"a": [{"password": "***REDACTED***", "ok": 1}], "api_key": "***REDACTED***"})


if __name__ == "__main__":
    unittest.main()
