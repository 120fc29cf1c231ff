#!/usr/bin/env python3
"""
Main entry point for cloth simulation.

Usage:
    python main.py run --steps 200 --save trajectory.npy --animate
    python main.py run --width 30 --height 20 --no-sphere --mesh-plot
"""

import argparse
import sys

from verlet_cloth import ClothParams, SimConfig, ClothSimulator, save_trajectory, setup_logging
from verlet_cloth.logging_config import LOG_LEVELS


def run_simulation(args):
    """Run a headless simulation."""
    print("=== Cloth Simulation ===")

    # Create config
    config = SimConfig(
        width=args.width,
        height=args.height,
        dt=args.dt,
        steps=args.steps,
        wind=tuple(args.wind),
        use_wind=not args.no_wind,
        sphere_center=tuple(args.sphere),
        sphere_radius=args.radius,
        use_sphere=not args.no_sphere,
        cloth=ClothParams(
            solver_iterations=args.iterations,
            gravity=(0.0, -args.gravity, 0.0),
            damping=args.damping,
            normal_mode=args.normal_mode,
        ),
    )

    print(f"Config: {config.width}x{config.height} grid, {config.cloth.solver_iterations} solver iterations")
    print(f"Steps: {config.steps}, dt={config.dt:.4f}")

    # Create simulator
    simulator = ClothSimulator(config)
    print(f"Constraints: {simulator.cloth.num_constraints}")

    # Run simulation
    print("Running simulation...")
    trajectory = simulator.run(record=True)
    print(f"Trajectory shape: {trajectory.shape}")

    # Save if requested
    if args.save:
        save_trajectory(trajectory, args.save)
        print(f"Trajectory saved to {args.save}")

    # Animate if requested
    if args.animate:
        from verlet_cloth.visualization import animate_particles

        print("Creating animation...")
        animate_particles(trajectory, save_path=args.animation_path)
        print(f"Animation saved to {args.animation_path}")

    # Plot trajectories if requested
    if args.plot:
        import matplotlib.pyplot as plt
        from verlet_cloth.visualization import plot_trajectories

        plot_trajectories(trajectory)
        plt.savefig(args.plot_path)
        print(f"Trajectory plot saved to {args.plot_path}")

    # Plot the final mesh if requested
    if args.mesh_plot:
        import matplotlib.pyplot as plt
        from verlet_cloth.visualization import plot_mesh

        positions, normals = simulator.get_mesh()
        plot_mesh(positions, normals)
        plt.savefig(args.mesh_path)
        print(f"Mesh plot saved to {args.mesh_path}")

    print("Done!")
    return trajectory


def main():
    parser = argparse.ArgumentParser(
        description="Verlet cloth simulation with wind, gravity and sphere collision"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level",
    )
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Run a simulation")

    # Grid parameters
    run_parser.add_argument("--width", type=int, default=55, help="Grid width")
    run_parser.add_argument("--height", type=int, default=45, help="Grid height")

    # Physics parameters
    run_parser.add_argument("--gravity", type=float, default=0.2, help="Gravity magnitude")
    run_parser.add_argument("--damping", type=float, default=0.01, help="Particle damping")
    run_parser.add_argument(
        "--iterations", type=int, default=15, help="Constraint solver iterations"
    )
    run_parser.add_argument(
        "--normal-mode",
        choices=["incremental", "smooth"],
        default="incremental",
        help="Vertex normal accumulation scheme",
    )

    # Scene parameters
    run_parser.add_argument(
        "--wind", type=float, nargs=3, default=[12.0, 0.0, 0.6], metavar=("X", "Y", "Z"),
        help="Wind direction",
    )
    run_parser.add_argument("--no-wind", action="store_true", help="Disable wind")
    run_parser.add_argument(
        "--sphere", type=float, nargs=3, default=[0.0, 0.0, 0.0], metavar=("X", "Y", "Z"),
        help="Collision sphere center",
    )
    run_parser.add_argument("--radius", type=float, default=0.2, help="Collision sphere radius")
    run_parser.add_argument("--no-sphere", action="store_true", help="Disable sphere collision")

    # Simulation parameters
    run_parser.add_argument("--dt", type=float, default=0.25, help="Time step")
    run_parser.add_argument("--steps", type=int, default=200, help="Number of steps")

    # Output options
    run_parser.add_argument("--save", type=str, help="Save trajectory to file")
    run_parser.add_argument(
        "--animate", action="store_true", help="Create particle animation"
    )
    run_parser.add_argument(
        "--animation-path", type=str, default="cloth_animation.gif", help="Animation output path"
    )
    run_parser.add_argument(
        "--plot", action="store_true", help="Plot particle trajectories"
    )
    run_parser.add_argument(
        "--plot-path", type=str, default="trajectories.png", help="Plot output path"
    )
    run_parser.add_argument(
        "--mesh-plot", action="store_true", help="Plot the final shaded mesh"
    )
    run_parser.add_argument(
        "--mesh-path", type=str, default="mesh.png", help="Mesh plot output path"
    )

    args = parser.parse_args()
    setup_logging(args.log_level, args.log_file)

    if args.command == "run":
        run_simulation(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
