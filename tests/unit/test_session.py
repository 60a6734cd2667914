import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "bitmap"))
sys.path.insert(0, str(ROOT / "packages" / "client"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from gamesense_client import BitmapScreen, GameOptions, RequestError, ScreenDeviceType, TextScreen
from gamesense_client.events import GameEvent
from gamesense_client.models import EventOptions
from gamesense_core.config import AppConfig
from gamesense_core.session import ScreenSession, build_client


class FakeClient:
    def __init__(self, fail_on=None):
        self.game = GameOptions(game_id="TEST_GAME")
        self.address = "127.0.0.1:1"
        self.calls = []
        self.fail_on = fail_on

    def _record(self, name, *args):
        if name == self.fail_on:
            raise RequestError("Invalid status code: 500", status=500)
        self.calls.append((name,) + args)

    def register_game(self):
        self._record("register_game")

    def register_event(self, event):
        self._record("register_event", event.event_id)

    def bind_screen(self, event, screen):
        self._record("bind_screen", event.event_id, screen.device_type.value)

    def send_event(self, event, value, frame=None):
        self._record("send_event", value, frame)
        event.value = value

    def heartbeat(self):
        self._record("heartbeat")

    def remove_game(self):
        self._record("remove_game")


def _event(game_id="TEST_GAME"):
    return GameEvent(EventOptions(game_id=game_id, event_id="TEST_EVENT"))


class ScreenSessionTests(unittest.TestCase):
    def test_connect_registers_and_binds(self):
        client = FakeClient()
        session = ScreenSession(client, _event(), BitmapScreen(ScreenDeviceType.SCREEN_128x40))
        session.connect()
        self.assertEqual(
            [c[0] for c in client.calls],
            ["register_game", "register_event", "bind_screen"],
        )
        self.assertTrue(session.status.connected)
        self.assertEqual(session.recent_events(1)[0]["event"], "connect_ok")

    def test_render_connects_lazily_and_sends_frame(self):
        client = FakeClient()
        screen = BitmapScreen(ScreenDeviceType.SCREEN_128x36)
        session = ScreenSession(client, _event(), screen)
        with session.lock:
            screen.framebuffer.draw_line(0, 0, 127, 35)
        session.render(value=12)

        name, value, frame = client.calls[-1]
        self.assertEqual((name, value), ("send_event", 12))
        self.assertEqual(frame, {"image-data-128x36": screen.framebuffer.export_bytes()})
        self.assertEqual(session.status.frames_sent, 1)
        self.assertEqual(session.status.last_value, 12)

        session.render()
        self.assertEqual(client.calls[-1][1], 12)

    def test_render_requires_bitmap_screen(self):
        session = ScreenSession(FakeClient(), _event(), TextScreen(ScreenDeviceType.SCREEN_128x40))
        with self.assertRaises(TypeError):
            session.render()

    def test_send_failure_is_recorded_and_raised(self):
        client = FakeClient(fail_on="send_event")
        session = ScreenSession(client, _event(), TextScreen(ScreenDeviceType.SCREEN_128x40))
        with self.assertRaises(RequestError):
            session.send(5)
        self.assertIn("500", session.status.last_error)
        self.assertEqual(session.recent_events(1)[0]["event"], "send_error")

    def test_connect_failure_leaves_disconnected(self):
        session = ScreenSession(FakeClient(fail_on="bind_screen"), _event(), BitmapScreen(ScreenDeviceType.SCREEN_128x40))
        with self.assertRaises(RequestError):
            session.connect()
        self.assertFalse(session.status.connected)

    def test_disconnect_can_remove_game(self):
        client = FakeClient()
        session = ScreenSession(client, _event(), BitmapScreen(ScreenDeviceType.SCREEN_128x40))
        session.connect()
        session.heartbeat()
        session.disconnect(remove_game=True)
        self.assertEqual([c[0] for c in client.calls][-2:], ["heartbeat", "remove_game"])
        self.assertFalse(session.status.connected)

    def test_recent_events_limit(self):
        session = ScreenSession(FakeClient(), _event(), BitmapScreen(ScreenDeviceType.SCREEN_128x40))
        session.connect()
        self.assertEqual(len(session.recent_events(1)), 1)
        self.assertEqual(session.recent_events(0), [])
        self.assertEqual(session.recent_events(-3), [])

    def test_heartbeat_failure_is_recorded_and_raised(self):
        session = ScreenSession(FakeClient(fail_on="heartbeat"), _event(), BitmapScreen(ScreenDeviceType.SCREEN_128x40))
        with self.assertRaises(RequestError):
            session.heartbeat()
        self.assertIn("500", session.status.last_error)
        self.assertEqual(session.recent_events(1)[0]["event"], "heartbeat_error")

    def test_event_must_match_game(self):
        with self.assertRaises(ValueError):
            ScreenSession(FakeClient(), _event("OTHER_GAME"), BitmapScreen(ScreenDeviceType.SCREEN_128x40))

    def test_from_config_builds_bitmap_screen(self):
        cfg = AppConfig()
        cfg.service.address = "127.0.0.1:51248"
        cfg.screen.device_type = "screened-128x48"
        session = ScreenSession.from_config(cfg, "STATS", max_value=200)
        self.assertIsInstance(session.screen, BitmapScreen)
        self.assertEqual(session.screen.framebuffer.height, 48)
        self.assertEqual(session.event.max_value, 200)
        self.assertEqual(session.client.address, "127.0.0.1:51248")

    def test_build_client_uses_config(self):
        cfg = AppConfig()
        cfg.service.address = "127.0.0.1:51248"
        cfg.service.timeout_s = 2.5
        cfg.game.game_id = "MY_GAME"
        client = build_client(cfg)
        self.assertEqual(client.game.game_id, "MY_GAME")
        self.assertEqual(client.game.deinitialize_timer_ms, 15000)
        self.assertEqual(client.timeout_s, 2.5)


if __name__ == "__main__":
    unittest.main()
