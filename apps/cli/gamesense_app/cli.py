"""CLI entrypoints for GameSense registration, events, bitmap drawing, and diagnostics."""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict
from importlib import metadata
from pathlib import Path

import psutil
from PIL import Image

from gamesense_bitmap import Framebuffer, image_to_framebuffer, save_preview
from gamesense_client import (
    EventIcon,
    GameSenseError,
    ScreenDeviceType,
    ScreenLine,
    TextScreen,
)
from gamesense_core import (
    ScreenSession,
    bitmap_screen_from_config,
    build_client,
    build_doctor_payload,
    configure_logging,
    load_config,
)


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _installed_version() -> str:
    try:
        return metadata.version("gamesense")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def _int_tuple(count: int):
    def parse(value: str) -> tuple[int, ...]:
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != count:
            raise argparse.ArgumentTypeError(f"expected {count} comma-separated integers, got {value!r}")
        try:
            return tuple(int(p) for p in parts)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"not an integer list: {value!r}") from exc

    return parse


def _event_options(args: argparse.Namespace) -> dict[str, object]:
    options: dict[str, object] = {}
    if getattr(args, "min", None) is not None:
        options["min_value"] = args.min
    if getattr(args, "max", None) is not None:
        options["max_value"] = args.max
    if getattr(args, "icon", None):
        options["icon"] = EventIcon[args.icon]
    if getattr(args, "value_optional", False):
        options["value_optional"] = True
    return options


def draw_meter(fb: Framebuffer, top: int, height: int, percent: float) -> None:
    """Outlined horizontal bar across the screen, filled to ``percent``."""
    right = fb.width - 1
    bottom = top + height - 1
    fb.draw_rect(0, top, fb.width, height, False)
    fb.draw_line(0, top, right, top)
    fb.draw_line(0, bottom, right, bottom)
    fb.draw_line(0, top, 0, bottom)
    fb.draw_line(right, top, right, bottom)

    inner = fb.width - 4
    filled = int(round(inner * max(0.0, min(100.0, percent)) / 100.0))
    if filled and height > 4:
        fb.draw_rect(2, top + 2, filled, height - 4, True)


def cmd_doctor(_args: argparse.Namespace) -> int:
    cfg = load_config()
    _print_json(build_doctor_payload(cfg))
    return 0


def cmd_address(_args: argparse.Namespace) -> int:
    client = build_client(load_config())
    _print_json({"address": client.get_address()})
    return 0


def cmd_register(_args: argparse.Namespace) -> int:
    cfg = load_config()
    client = build_client(cfg)
    client.register_game()
    _print_json({"success": True, "game": cfg.game.game_id, "address": client.address})
    return 0


def cmd_register_event(args: argparse.Namespace) -> int:
    client = build_client(load_config())
    event = client.new_event(args.event, **_event_options(args))
    client.register_event(event)
    _print_json({"success": True, "registration": event.registration_payload()})
    return 0


def cmd_send(args: argparse.Namespace) -> int:
    client = build_client(load_config())
    event = client.new_event(args.event)
    frame = json.loads(args.frame) if args.frame else None
    event.send(client, args.value, frame=frame)
    _print_json({"success": True, "event": event.event_id, "value": event.value})
    return 0


def cmd_bind_text(args: argparse.Namespace) -> int:
    cfg = load_config()
    client = build_client(cfg)
    event = client.new_event(args.event, **_event_options(args))
    screen = TextScreen(ScreenDeviceType(args.device_type or cfg.screen.device_type))
    screen.add_line(ScreenLine(has_text=True, prefix=args.prefix, suffix=args.suffix, bold=args.bold or None))
    if args.progress_bar:
        screen.add_line(ScreenLine(has_text=False, has_progress_bar=True))
    client.bind_screen(event, screen)
    _print_json({"success": True, "event": event.event_id, "datas": screen.datas()})
    return 0


def cmd_draw(args: argparse.Namespace) -> int:
    cfg = load_config()
    if args.device_type:
        cfg.screen.device_type = args.device_type
    screen = bitmap_screen_from_config(cfg)
    fb = screen.framebuffer

    if args.image:
        with Image.open(args.image) as img:
            loaded = image_to_framebuffer(img, fb.width, fb.height, threshold=args.threshold, dither=args.dither)
        fb.load_bytes(loaded.to_bytes())
    for x, y, w, h in args.rect or []:
        fb.draw_rect(x, y, w, h, not args.erase)
    for x1, y1, x2, y2 in args.line or []:
        fb.draw_line(x1, y1, x2, y2, not args.erase)
    for x, y in args.pixel or []:
        fb.set_pixel(x, y, not args.erase)

    if args.preview:
        save_preview(fb, Path(args.preview), scale=args.scale)

    result: dict[str, object] = {
        "size": fb.size_str,
        "bytes": len(fb),
        "lit_pixels": fb.count_set(),
        "preview": args.preview,
        "sent": False,
    }
    if not args.no_send:
        session = ScreenSession.from_config(cfg, args.event, screen=screen)
        session.connect()
        session.render()
        result["sent"] = True
        result["address"] = session.client.address
    _print_json(result)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    cfg = load_config()
    session = ScreenSession.from_config(cfg, args.event, icon=EventIcon.CPU)
    fb = session.screen.framebuffer
    bar_height = fb.height // 2 - 2

    session.connect()
    psutil.cpu_percent(interval=None)
    deadline = time.monotonic() + args.seconds
    frames = 0
    try:
        while time.monotonic() < deadline:
            time.sleep(args.interval)
            cpu = float(psutil.cpu_percent(interval=None))
            ram = float(psutil.virtual_memory().percent)
            with session.lock:
                draw_meter(fb, 1, bar_height, cpu)
                draw_meter(fb, fb.height - bar_height - 1, bar_height, ram)
                session.render(value=int(round(cpu)))
            frames += 1
    finally:
        session.disconnect()

    _print_json({"frames": frames, "seconds": args.seconds, "status": asdict(session.status)})
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    client = build_client(load_config())
    if args.event:
        client.remove_event(client.new_event(args.event))
    else:
        client.remove_game()
    _print_json({"success": True, "removed": args.event or client.game.game_id})
    return 0


def _add_event_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--min", type=int, default=None, help="Minimum event value (default 0)")
    parser.add_argument("--max", type=int, default=None, help="Maximum event value (default 100)")
    parser.add_argument("--icon", choices=[i.name for i in EventIcon], default=None)
    parser.add_argument("--value-optional", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gamesense", description="GameSense client tools")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_installed_version()}")
    parser.add_argument("--verbose", action="store_true", help="Log to the console as well as the log file")
    sub = parser.add_subparsers(dest="command", required=True)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and service discovery state")
    doctor_cmd.set_defaults(func=cmd_doctor)

    address_cmd = sub.add_parser("address", help="Print the discovered service address")
    address_cmd.set_defaults(func=cmd_address)

    register_cmd = sub.add_parser("register", help="Register the configured game")
    register_cmd.set_defaults(func=cmd_register)

    event_cmd = sub.add_parser("register-event", help="Register an event without handlers")
    event_cmd.add_argument("--event", required=True)
    _add_event_options(event_cmd)
    event_cmd.set_defaults(func=cmd_register_event)

    send_cmd = sub.add_parser("send", help="Send an event value")
    send_cmd.add_argument("--event", required=True)
    send_cmd.add_argument("--value", type=int, required=True)
    send_cmd.add_argument("--frame", default=None, help="Optional JSON object of context frame data")
    send_cmd.set_defaults(func=cmd_send)

    text_cmd = sub.add_parser("bind-text", help="Bind a text screen to an event")
    text_cmd.add_argument("--event", required=True)
    text_cmd.add_argument("--prefix", default=None)
    text_cmd.add_argument("--suffix", default=None)
    text_cmd.add_argument("--bold", action="store_true")
    text_cmd.add_argument("--progress-bar", action="store_true", help="Add a progress bar line")
    text_cmd.add_argument("--device-type", choices=[t.value for t in ScreenDeviceType], default=None)
    _add_event_options(text_cmd)
    text_cmd.set_defaults(func=cmd_bind_text)

    draw_cmd = sub.add_parser("draw", help="Draw on a bitmap screen and send it")
    draw_cmd.add_argument("--event", default="BITMAP")
    draw_cmd.add_argument("--device-type", choices=[t.value for t in ScreenDeviceType], default=None)
    draw_cmd.add_argument("--image", default=None, help="Image file to rasterize first")
    draw_cmd.add_argument("--threshold", type=int, default=128)
    draw_cmd.add_argument("--dither", action="store_true")
    draw_cmd.add_argument("--rect", type=_int_tuple(4), action="append", metavar="X,Y,W,H")
    draw_cmd.add_argument("--line", type=_int_tuple(4), action="append", metavar="X1,Y1,X2,Y2")
    draw_cmd.add_argument("--pixel", type=_int_tuple(2), action="append", metavar="X,Y")
    draw_cmd.add_argument("--erase", action="store_true", help="Clear pixels instead of setting them")
    draw_cmd.add_argument("--preview", default=None, help="Write a PNG preview to this path")
    draw_cmd.add_argument("--scale", type=int, default=4)
    draw_cmd.add_argument("--no-send", action="store_true", help="Only draw and preview")
    draw_cmd.set_defaults(func=cmd_draw)

    stats_cmd = sub.add_parser("stats", help="Stream CPU/RAM meters to a bitmap screen")
    stats_cmd.add_argument("--event", default="SYSTEM_STATS")
    stats_cmd.add_argument("--seconds", type=int, default=30)
    stats_cmd.add_argument("--interval", type=float, default=1.0)
    stats_cmd.set_defaults(func=cmd_stats)

    remove_cmd = sub.add_parser("remove", help="Remove an event, or the whole game")
    remove_cmd.add_argument("--event", default=None)
    remove_cmd.set_defaults(func=cmd_remove)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=args.verbose)
    try:
        return int(args.func(args))
    except (GameSenseError, ValueError) as exc:
        # OutOfRangeError and JSONDecodeError are ValueErrors.
        _print_json({"success": False, "error": str(exc), "type": type(exc).__name__})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
