# bell_qsim/cli.py
"""
Command-line driver for the CHSH experiment.

    bell-qsim                      # run the "chsh" preset
    bell-qsim run --preset chsh-alt --backend numba
    bell-qsim sweep --points 33
    bell-qsim plot --csv data/serial/sweep.csv
"""
import argparse
import logging
import os
import sys

import numpy as np

from .errors import BellSimError
from .experiment import PRESETS, AngleSet, Experiment, format_report
from .state import BACKENDS

logger = logging.getLogger("bell_qsim")

COMMANDS = ("run", "sweep", "plot")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bell-qsim",
                                description="State-vector simulation of the CHSH Bell test")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    sub = p.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="run the four CHSH trials and print E and S (default)")
    p_run.add_argument("--preset", choices=sorted(PRESETS), default="chsh")
    for name in ("a1", "b1", "a2", "b2"):
        p_run.add_argument(f"--{name}", type=float, default=None, help=f"override angle {name} (radians)")
    p_run.add_argument("--backend", type=str, default="serial", choices=list(BACKENDS))
    p_run.add_argument("--dtype", type=str, default="complex128", choices=["complex64", "complex128"])
    p_run.add_argument("--threads", type=int, default=None, help="numba thread count")
    p_run.add_argument("--workers", type=int, default=None, help="run trials on a thread pool")
    p_run.add_argument("--quiet", action="store_true", help="omit per-trial probability maps")

    p_sweep = sub.add_parser("sweep", help="S as a function of the angle offset phi → CSV")
    p_sweep.add_argument("--points", type=int, default=33)
    p_sweep.add_argument("--max-phi", type=float, default=float(np.pi/2))
    p_sweep.add_argument("--backend", type=str, default="serial", choices=list(BACKENDS))
    p_sweep.add_argument("--out", type=str, default=None, help="CSV path (default data/<backend>/sweep.csv)")

    p_plot = sub.add_parser("plot", help="plot a sweep CSV")
    p_plot.add_argument("--csv", type=str, default=None, help="sweep CSV (default data/serial/sweep.csv)")
    p_plot.add_argument("--out", type=str, default=None)
    return p


def _angles(args) -> AngleSet:
    base = PRESETS[args.preset]
    return AngleSet(*(getattr(base, k) if getattr(args, k) is None else getattr(args, k)
                      for k in ("a1", "b1", "a2", "b2")))


def cmd_run(args) -> int:
    exp = Experiment(_angles(args), backend=args.backend, dtype=np.dtype(args.dtype), workers=args.workers)
    if args.backend == "numba" and args.threads is not None:
        from .apply_numba import set_threads
        set_threads(args.threads)
    result = exp.run()
    for line in format_report(result, show_probabilities=not args.quiet):
        print(line)
    return 0


def cmd_sweep(args) -> int:
    from .sweep import backend_dir, phi_grid, sweep_angles
    if args.points < 2:
        print("error: --points must be >= 2", file=sys.stderr)
        return 2
    out_path = args.out or os.path.join(backend_dir(args.backend), "sweep.csv")
    sweep_angles(phi_grid(args.points, args.max_phi), backend=args.backend, out_path=out_path)
    return 0


def cmd_plot(args) -> int:
    from .plot_results import plot_sweep
    from .sweep import DATA_DIR
    csv_path = args.csv or os.path.join(DATA_DIR, "serial", "sweep.csv")
    if not os.path.exists(csv_path):
        print(f"No sweep CSV at {csv_path}; run `bell-qsim sweep` first", file=sys.stderr)
        return 1
    out = plot_sweep(csv_path, args.out)
    print(f"Saved plot to {out}")
    return 0


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # `run` is the default command
    if not any(a in COMMANDS or a in ("-h", "--help") for a in argv):
        i = 0
        while i < len(argv) and (argv[i] == "--verbose" or argv[i].startswith("-v")):
            i += 1
        argv.insert(i, "run")
    args = build_parser().parse_args(argv)

    level = logging.WARNING if args.verbose == 0 else logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    handlers = {"run": cmd_run, "sweep": cmd_sweep, "plot": cmd_plot}
    try:
        return handlers[args.cmd](args)
    except BellSimError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
