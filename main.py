import sys

# Configuration
from config import load_group_control_config, load_simulation_config

# Controller
from controller.system import ElevatorSystem


def run_simulation(sim_config_path="scenarios/simulation/default.yaml",
                   gc_config_path="scenarios/group_control/nearest_car.yaml",
                   plot=False):
    """
    Set up and run the entire simulation

    Args:
        sim_config_path: Path to simulation configuration YAML file
        gc_config_path: Path to group control configuration YAML file
        plot: Save a trajectory diagram after the run
    """
    print("--- Loading Configuration ---")

    sim_config = load_simulation_config(sim_config_path)
    gc_config = load_group_control_config(gc_config_path)

    print(f"Simulation Config: {sim_config_path}")
    print(f"Group Control Config: {gc_config_path}")

    print("\n--- Simulation Setup ---")
    system = ElevatorSystem(sim_config, gc_config)
    system.schedule_script()
    print(f"{len(sim_config.script)} scripted commands loaded")

    print("\n--- Simulation Start ---")
    system.run()
    print("--- Simulation End ---")

    for status in system.get_status()['elevators']:
        print(f"Elevator {status['id']}: floor {status['floor']}, {status['state']}, "
              f"mode {status['mode']}, destinations {status['destinations']}")
    pending = system.get_pending_calls()
    if pending:
        print(f"Pending calls: {', '.join(str(call) for call in pending)}")

    recorder = system.recorder
    if recorder is not None:
        recorder.print_summary()
        if sim_config.event_log_path:
            recorder.save_event_log(sim_config.event_log_path)
        if plot:
            recorder.plot_trajectories('elevator_trajectory_diagram.png')

    return system


def main(argv=None):
    """
    Command line entry point

    Usage:
        python main.py [simulation.yaml] [group_control.yaml] [--plot]
    """
    args = list(sys.argv[1:] if argv is None else argv)
    plot = '--plot' in args
    paths = [arg for arg in args if arg != '--plot']
    if len(paths) > 2:
        print("Usage: python main.py [simulation.yaml] [group_control.yaml] [--plot]")
        return 2

    try:
        run_simulation(*paths, plot=plot)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
