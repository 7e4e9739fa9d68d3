import argparse
import csv
import logging

import numpy as np

from .config import get_settings
from .kinetics import RateConstants
from .solver import compare_with_reference, euler_trajectory, reference_trajectory
from .species import SPECIES


def _add_run_args(p: argparse.ArgumentParser, defaults) -> None:
    p.add_argument("--k1", type=float, default=defaults.k1, help="Dehydrogenation rate constant")
    p.add_argument("--k2", type=float, default=defaults.k2, help="Aldol condensation rate constant")
    p.add_argument("--k3", type=float, default=defaults.k3, help="C=C hydrogenation rate constant")
    p.add_argument("--k4", type=float, default=defaults.k4, help="C=O hydrogenation rate constant")
    p.add_argument("--dt", type=float, default=defaults.time_step, help="Fixed time step")
    p.add_argument("--tmax", type=float, default=defaults.max_time, help="Simulated time horizon")
    p.add_argument("--sample", type=float, default=defaults.sample_interval, help="Simulated time between samples")
    p.add_argument("--c0", type=float, default=defaults.initial_concentration, help="Initial ethanol concentration")


def run_cli(argv=None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="GuerbetSim - ethanol upgrading kinetics")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Fixed-step Euler run, sampled trajectory to CSV")
    _add_run_args(p_run, settings)
    p_run.add_argument("--csv", type=str, default="trajectory.csv")

    p_cmp = sub.add_parser("compare", help="Max deviation of the Euler run from an adaptive reference")
    _add_run_args(p_cmp, settings)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.dt <= 0 or args.tmax <= 0 or args.sample <= 0:
        raise SystemExit("--dt, --tmax and --sample must be positive")
    try:
        constants = RateConstants(k1=args.k1, k2=args.k2, k3=args.k3, k4=args.k4)
    except ValueError as exc:
        raise SystemExit(str(exc))

    euler = euler_trajectory(
        constants,
        time_step=args.dt,
        max_time=args.tmax,
        sample_interval=args.sample,
        initial_concentration=args.c0,
    )
    if euler.empty:
        raise SystemExit("No samples recorded; --tmax is shorter than --sample")

    if args.cmd == "run":
        with open(args.csv, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["time"] + list(SPECIES))
            for row in euler.itertuples(index=False):
                writer.writerow(list(row))
        print(f"Wrote {len(euler)} samples to {args.csv}")
        return

    if args.cmd == "compare":
        ref = reference_trajectory(
            constants,
            t_end=float(euler["time"].iloc[-1]),
            t_eval=np.asarray(euler["time"], dtype=float),
            initial_concentration=args.c0,
        )
        deviation = compare_with_reference(euler, ref)
        for sp, dev in deviation.items():
            print(f"{sp:8s} {dev:.3e}")
        return


if __name__ == "__main__":
    run_cli()
