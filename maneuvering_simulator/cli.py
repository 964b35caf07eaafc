"""
    cli.py

    Summary:
        Command line entry point. Runs one simulation from a YAML configuration file,
        with optional overrides, and stores and/or plots the trajectory.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import maneuvering_simulator.common.file_utils as fu
import maneuvering_simulator.common.paths as dp
from maneuvering_simulator.common.exceptions import SimulatorError
from maneuvering_simulator.simulator import Simulator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Ship heading control simulation with the Clarke (1983) linear maneuvering model")
    p.add_argument("--config", type=str, default=str(dp.simulator_config), help="Path to the simulator YAML file")
    p.add_argument("--dt", type=float, default=None, help="Sampling time (s)")
    p.add_argument("--n-steps", type=int, default=None, help="Number of steps N (N + 1 samples)")
    p.add_argument("--psi-ref", type=float, default=None, help="Heading setpoint (deg)")
    p.add_argument("--w-n", type=float, default=None, help="Closed-loop natural frequency (rad/s)")
    p.add_argument("--thrust", type=float, default=None, help="Constant surge force (N)")
    p.add_argument(
        "--output",
        type=str,
        nargs="?",
        default=None,
        const=str(dp.trajectory_output / "trajectory.csv"),
        help="Write the trajectory table to this csv file (default file under output/trajectories)",
    )
    p.add_argument("--plot", action="store_true", help="Show speed/heading and north-east plots")
    p.add_argument("--animate", action="store_true", help="Animate the north-east trajectory")
    p.add_argument(
        "--save-figures",
        type=str,
        nargs="?",
        default=None,
        const=str(dp.figure_output),
        help="Folder where the figures are saved (default output/figures)",
    )
    p.add_argument(
        "--save-animation",
        type=str,
        nargs="?",
        default=None,
        const=str(dp.animation_output / "ship.gif"),
        help="Save the animation to this gif file (default file under output/animations)",
    )
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    controller_overrides = {k: v for k, v in {"w_n": args.w_n, "thrust": args.thrust}.items() if v is not None}
    try:
        simulator = Simulator(
            config_file=Path(args.config),
            dt=args.dt,
            n_steps=args.n_steps,
            psi_ref=args.psi_ref,
            controller=controller_overrides or None,
        )
        trajectory = simulator.run()
    except SimulatorError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    final = trajectory.iloc[-1]
    logger.info(
        "Simulated %d samples, final pose x = %.1f m, y = %.1f m, psi = %.3f rad",
        len(trajectory),
        final["x"],
        final["y"],
        final["psi"],
    )

    if args.output is not None:
        fu.write_trajectory_csv(trajectory, Path(args.output))
        logger.info("Trajectory written to %s", args.output)

    if args.plot or args.animate or args.save_figures is not None or args.save_animation is not None:
        import maneuvering_simulator.viz.animation as anim
        import maneuvering_simulator.viz.plotters as plotters

        plot_config = plotters.Config(show_plots=args.plot and not args.animate, show_animation=args.animate)
        if args.plot or args.save_figures is not None:
            plotters.plot_results(trajectory, plot_config, save_path=args.save_figures)
        if plot_config.show_animation or args.save_animation is not None:
            hull = simulator.config.hull
            anim.animate(
                trajectory,
                anim.ShipAnimation(length=hull.length, width=hull.beam, ship_size=plot_config.ship_size),
                show_animation=plot_config.show_animation,
                save_path=args.save_animation,
            )

    return 0


if __name__ == "__main__":
    sys.exit(main())
