"""CLI entrypoints for running programs, exporting frames, benchmarks, and diagnostics."""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any

from glyphgrid_core import (
    DiagnosticsExporter,
    JsonFileStore,
    PerformanceController,
    PerformanceTargets,
    Runner,
    RunnerState,
    build_doctor_payload,
    load_config,
    settings_from_config,
    state_path,
)
from glyphgrid_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from glyphgrid_renderer import list_renderers
from glyphgrid_surface import CancelToken, CanvasSurface, ManualHost, RealtimeHost, TextSurface

from .programs import get_program, list_programs

logger = get_logger("cli")

# Upper bound on virtual ticks when rendering a single frame off-screen.
_EXPORT_MAX_TICKS = 1000


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _build_runner(args: argparse.Namespace, host: Any, **overrides: Any) -> Runner:
    cfg = load_config()
    values = {
        "renderer_type": getattr(args, "renderer", None),
        "cols": getattr(args, "cols", None),
        "rows": getattr(args, "rows", None),
        "fps": getattr(args, "fps", None),
    }
    values.update(overrides)
    settings = settings_from_config(cfg, **values)
    store = JsonFileStore(state_path(cfg)) if settings.restore_state else None
    return Runner(
        get_program(args.program),
        settings=settings,
        host=host,
        store=store,
        surface_size=(cfg.surface.width, cfg.surface.height),
        max_events=cfg.diagnostics.max_events,
    )


def _status_payload(runner: Runner) -> dict[str, Any]:
    payload = asdict(runner.status)
    payload["state"] = runner.status.state.value
    return payload


def cmd_run(args: argparse.Namespace) -> int:
    host = RealtimeHost()
    runner = _build_runner(args, host, once=True if args.once else None)
    token = CancelToken()
    token.on_cancel(runner.stop)

    runner.start()
    try:
        host.run(max_seconds=args.seconds, token=token)
    except KeyboardInterrupt:
        token.cancel()
    runner.stop()
    logger.info(
        "run finished after %s frames",
        runner.frame_state.frame,
        extra={"event": "run_finished", "frame": runner.frame_state.frame},
    )

    surface = runner.surface
    if isinstance(surface, TextSurface):
        print(surface.plain_text())
    _print_json(_status_payload(runner))
    return 1 if runner.status.state == RunnerState.FAILED else 0


def cmd_export(args: argparse.Namespace) -> int:
    host = ManualHost()
    runner = _build_runner(args, host, once=True, renderer_type="canvas")

    ready = runner.start()
    ticks = 0
    while not ready.done() and ticks < _EXPORT_MAX_TICKS:
        host.tick()
        ticks += 1

    if runner.status.state != RunnerState.COMPLETED:
        _print_json({"success": False, "status": _status_payload(runner)})
        return 2

    surface = runner.surface
    if not isinstance(surface, CanvasSurface):
        _print_json({"success": False, "error": "canvas surface required"})
        return 2
    out = surface.save(Path(args.out).expanduser())
    _print_json({"success": True, "path": str(out), "size": list(surface.backing_size)})
    return 0


def cmd_benchmark(args: argparse.Namespace) -> int:
    cfg = load_config()
    perf = PerformanceController(
        PerformanceTargets(
            cpu_percent_max=cfg.performance.cpu_percent_max,
            rss_mb_max=cfg.performance.rss_mb_max,
            fps_min=cfg.performance.fps_min,
        )
    )
    host = RealtimeHost(refresh_hz=max(60.0, float(args.fps or cfg.run.fps)))
    runner = _build_runner(args, host)

    start = time.perf_counter()
    runner.start()
    host.run(max_seconds=args.seconds)
    runner.stop()
    elapsed = max(time.perf_counter() - start, 1e-9)

    budget = perf.sample(runner.status.fps, runner.settings.fps)
    frames = runner.frame_state.frame
    fps_actual = frames / elapsed

    pass_cpu = budget.cpu_percent <= cfg.performance.cpu_percent_max
    pass_mem = budget.rss_mb <= cfg.performance.rss_mb_max
    pass_fps = fps_actual >= min(cfg.performance.fps_min, runner.settings.fps)

    _print_json(
        {
            "program": args.program,
            "renderer": runner.settings.renderer_type,
            "seconds": args.seconds,
            "frames": frames,
            "fps": fps_actual,
            "rolling_fps": runner.status.fps,
            "budget": {
                "observed": asdict(budget),
                "pass": bool(pass_cpu and pass_mem and pass_fps),
                "checks": {
                    "cpu": pass_cpu,
                    "memory": pass_mem,
                    "fps": pass_fps,
                },
            },
        }
    )
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, recent_runner_events=[], output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def cmd_list_programs(_args: argparse.Namespace) -> int:
    _print_json({"programs": list_programs(), "renderers": list_renderers()})
    return 0


def _add_program_args(cmd: argparse.ArgumentParser, default: str | None = None) -> None:
    cmd.add_argument("--program", required=default is None, default=default, choices=list_programs())
    cmd.add_argument("--cols", type=int, default=None, help="Fixed column count (default: fit surface)")
    cmd.add_argument("--rows", type=int, default=None, help="Fixed row count (default: fit surface)")
    cmd.add_argument("--fps", type=float, default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glyphgrid", description="Character-grid animation runtime")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run a program and print the last text frame")
    _add_program_args(run_cmd)
    run_cmd.add_argument("--renderer", default=None, choices=list_renderers())
    run_cmd.add_argument("--once", action="store_true", help="Stop after the first rendered frame")
    run_cmd.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds")
    run_cmd.set_defaults(func=cmd_run)

    export_cmd = sub.add_parser("export", help="Render one canvas frame to an image file")
    _add_program_args(export_cmd)
    export_cmd.add_argument("--out", required=True, help="Output image path, e.g. frame.png")
    export_cmd.set_defaults(func=cmd_export)

    bench_cmd = sub.add_parser("benchmark", help="Run a program flat out and report frame rate and budget")
    _add_program_args(bench_cmd, default="density")
    bench_cmd.add_argument("--renderer", default=None, choices=list_renderers())
    bench_cmd.add_argument("--seconds", type=float, default=10.0)
    bench_cmd.set_defaults(func=cmd_benchmark)

    doctor_cmd = sub.add_parser("doctor", help="Print environment, font, and config diagnostics")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    list_cmd = sub.add_parser("list-programs", help="List bundled programs and renderers")
    list_cmd.set_defaults(func=cmd_list_programs)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    if argv is None:
        # Interpreter-wide hooks belong to the process entry, not embedded calls.
        install_crash_hooks()
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
