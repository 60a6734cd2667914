import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "bitmap"))
sys.path.insert(0, str(ROOT / "packages" / "client"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from gamesense_core import diagnostics
from gamesense_core.config import AppConfig


class _Proc:
    def __init__(self, pid, name):
        self.info = {"pid": pid, "name": name}


class DiagnosticsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        patcher = patch("gamesense_core.logging_setup.config_root", return_value=Path(self._tmp.name))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_redact_nested(self):
        payload = {"service": {"api_key": "abc", "address": "127.0.0.1:1"}, "items": [{"token": "t"}]}
        out = diagnostics.redact(payload)
        self.assertEqual(out["service"]["api_key"], "***REDACTED***")
        self.assertEqual(out["service"]["address"], "127.0.0.1:1")
        self.assertEqual(out["items"][0]["token"], "***REDACTED***")

    def test_engine_process_detection(self):
        procs = [_Proc(1, "SteelSeriesGG.exe"), _Proc(2, "python"), _Proc(3, "SteelSeries Engine 3"), _Proc(4, None)]
        with patch.object(diagnostics.psutil, "process_iter", return_value=procs):
            found = diagnostics.find_engine_processes()
        self.assertEqual([p["pid"] for p in found], [1, 3])

    def test_doctor_payload_with_explicit_address(self):
        cfg = AppConfig()
        cfg.service.address = "127.0.0.1:51248"
        with patch.object(diagnostics.psutil, "process_iter", return_value=[]):
            payload = diagnostics.build_doctor_payload(cfg)
        self.assertEqual(payload["address"], "127.0.0.1:51248")
        self.assertIsNone(payload["address_error"])
        self.assertEqual(payload["engine_processes"], [])
        self.assertEqual(payload["config"]["screen"]["device_type"], "screened-128x40")

    def test_doctor_payload_reports_discovery_error(self):
        cfg = AppConfig()
        with patch.object(diagnostics.psutil, "process_iter", return_value=[]), patch.object(
            diagnostics, "discover_address", side_effect=diagnostics.DiscoveryError("missing coreProps")
        ):
            payload = diagnostics.build_doctor_payload(cfg)
        self.assertIsNone(payload["address"])
        self.assertEqual(payload["address_error"], "missing coreProps")


if __name__ == "__main__":
    unittest.main()
