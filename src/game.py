import argparse
import logging

from engine import Aspiration, EngineConfig, EngineSimulation, Layout
from settings import FPS, HEIGHT, LOG_CSV, SOUND_FILE, WIDTH, Settings, setup_logging
from telemetry import TelemetryLog

log = logging.getLogger("game")


def build_parser():
    parser = argparse.ArgumentParser(prog="engine-sim", description="Engine Simulator 2")
    parser.add_argument("--no-gui", action="store_true", help="Run headless")
    parser.add_argument("--sound", type=str, default=SOUND_FILE, help="Engine sound file path")
    parser.add_argument("--log-csv", type=str, default=LOG_CSV, help="Telemetry CSV path ('' disables)")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--duration", type=float, default=10.0, help="Headless run length in seconds")
    parser.add_argument("--throttle", type=float, default=1.0, help="Headless throttle, 0..1")
    parser.add_argument("--cylinders", type=int)
    parser.add_argument("--stroke-type", type=int, choices=(2, 4))
    parser.add_argument("--layout", choices=[l.value for l in Layout])
    parser.add_argument("--aspiration", choices=[a.value for a in Aspiration])
    parser.add_argument("--displacement", type=float, help="Displacement in cc")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def settings_from_args(args):
    try:
        engine = EngineConfig().with_overrides(
            cylinders=args.cylinders,
            stroke_type=args.stroke_type,
            layout=Layout(args.layout) if args.layout else None,
            aspiration=Aspiration(args.aspiration) if args.aspiration else None,
            displacement_cc=args.displacement,
        )
    except ValueError as e:
        raise SystemExit(f"engine-sim: invalid engine configuration: {e}")
    return Settings(
        width=args.width, height=args.height, fps=max(1, args.fps),
        log_csv=args.log_csv, sound_file=args.sound, headless=args.no_gui,
        duration=max(0.0, args.duration), throttle=args.throttle, engine=engine,
    )


def run_headless(settings):
    """Run the engine model without a window and return its final state."""
    eng = EngineSimulation(settings.engine)
    eng.start()
    eng.set_throttle(settings.throttle)
    dt = 1.0 / settings.fps
    steps = int(round(settings.duration * settings.fps))
    with TelemetryLog(settings.log_csv) as telemetry:
        for i in range(steps):
            eng.update(dt)
            telemetry.write((i + 1) * dt, eng.get_state())
    st = eng.get_state()
    log.info("Headless run: %.1fs at throttle %.2f -> %.0f rpm, %.1f Nm, %.1f hp",
             settings.duration, eng.throttle, st["rpm"], st["torque"], st["horsepower"])
    return st


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    settings = settings_from_args(args)
    if settings.headless:
        run_headless(settings)
        return
    from app import run
    run(settings)


if __name__ == "__main__":
    main()
