import json
from datetime import datetime
from enum import Enum

import matplotlib
import matplotlib.pyplot as plt


class EventRecorder:
    """
    Receives every event published on the building broker and records
    what is needed for analysis as an independent "recorder".

    Collects all events in JSON Lines format for offline playback, the
    floor trajectory of every elevator and the service time of every
    hall call (call registered until doors opened on that floor).
    """
    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.elevator_trajectories = {}  # {elevator_id: [(time, floor), ...]}
        self.door_events_history = {}  # {elevator_id: [(time, floor, 'opened' | 'closed'), ...]}
        self.open_hall_calls = {}  # {(floor, direction): time registered}
        self.hall_call_service_times = []  # [(floor, direction, service time)]

        # JSON Lines event log for offline playback
        self.event_log = []
        self.simulation_metadata = {}

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration (num_floors, elevators, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def register_elevators(self, elevators):
        """Record the starting floor of each elevator as the first trajectory point"""
        for elevator in elevators:
            self.elevator_trajectories.setdefault(elevator.id, []).append((self.env.now, elevator.current_floor))

    def start_listening(self):
        """
        Main process to start intercepting building broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            topic = data.get('topic', '')
            message = data.get('message', {})
            try:
                self.record(topic, message)
            except (KeyError, TypeError, ValueError) as e:
                print(f"{self.env.now:.2f} [Recorder] Failed to record '{topic}': {e}")

    def record(self, topic, message):
        """Record one broadcast message"""
        timestamp = message.get('timestamp', self.env.now)
        self._add_event_log(topic, timestamp, self._to_plain(message))

        if topic == 'elevator_floor_changed':
            elevator_id = message['elevator'].id
            trajectory = self.elevator_trajectories.setdefault(elevator_id, [])
            if not trajectory:
                trajectory.append((timestamp, message['old_floor']))
            trajectory.append((timestamp, message['new_floor']))

        elif topic == 'elevator_called':
            key = (message['floor'], self._to_plain(message['direction']))
            self.open_hall_calls.setdefault(key, timestamp)

        elif topic == 'elevator_doors_opened':
            elevator_id = message['elevator'].id
            floor = message['floor']
            self.door_events_history.setdefault(elevator_id, []).append((timestamp, floor, 'opened'))
            for key in [key for key in self.open_hall_calls if key[0] == floor]:
                registered = self.open_hall_calls.pop(key)
                self.hall_call_service_times.append((floor, key[1], timestamp - registered))

        elif topic == 'elevator_doors_closed':
            elevator_id = message['elevator'].id
            self.door_events_history.setdefault(elevator_id, []).append((timestamp, message['floor'], 'closed'))

        elif topic == 'building_reset':
            self.open_hall_calls = {}

    def _add_event_log(self, event_type, timestamp, event_data):
        event_data = {key: value for key, value in event_data.items() if key != 'timestamp'}
        self.event_log.append({
            "time": timestamp,
            "type": event_type,
            "data": event_data
        })

    def _to_plain(self, value):
        """Convert event payload values into JSON-compatible data"""
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {key: self._to_plain(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._to_plain(item) for item in value]
        if hasattr(value, 'id') and hasattr(value, 'current_floor'):
            return value.id  # Elevator objects are logged by id
        return value

    def get_average_service_time(self):
        if not self.hall_call_service_times:
            return None
        return sum(t for _, _, t in self.hall_call_service_times) / len(self.hall_call_service_times)

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Returns:
            The file name, or None if the log could not be written
        """
        print(f"\nSaving event log to {filename}...")
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                if self.simulation_metadata:
                    f.write(json.dumps({"type": "metadata", "data": self.simulation_metadata}) + '\n')
                for event in self.event_log:
                    f.write(json.dumps(event, ensure_ascii=False) + '\n')
        except (OSError, TypeError) as e:
            print(f"ERROR: Could not write event log {filename}: {e}")
            return None

        print(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename

    def plot_trajectories(self, output_filename=None, show=False):
        """
        Draw the travel diagram of every elevator.

        Args:
            output_filename: PNG file to save the diagram to (optional)
            show: Open an interactive window

        Returns:
            The matplotlib figure, or None if plotting failed
        """
        print("\n--- Plotting: Elevator Trajectory Diagram ---")
        if not show:
            matplotlib.use('Agg')
        try:
            fig = plt.figure(figsize=(14, 8))
            elevator_colors = ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b']
            end_time = self.env.now

            for idx, elevator_id in enumerate(sorted(self.elevator_trajectories)):
                trajectory = self.elevator_trajectories[elevator_id]
                if not trajectory:
                    continue
                # Extend the last position to the end of the run
                points = sorted(trajectory, key=lambda x: x[0]) + [(end_time, trajectory[-1][1])]
                times, floors = zip(*points)
                color = elevator_colors[idx % len(elevator_colors)]
                plt.step(times, floors, where='post', label=f"Elevator {elevator_id}",
                         linewidth=2.5, color=color, alpha=0.8)

                for timestamp, floor, kind in self.door_events_history.get(elevator_id, []):
                    if kind == 'opened':
                        plt.scatter(timestamp, floor, marker='|', s=120, color=color)

            plt.title("Elevator Trajectory Diagram (Travel Diagram)")
            plt.xlabel("Time (s)")
            plt.ylabel("Floor")
            plt.grid(True, which='both', linestyle='--', alpha=0.7)

            all_floors = [floor for trajectory in self.elevator_trajectories.values() for _, floor in trajectory]
            if all_floors:
                plt.yticks(range(int(min(all_floors)), int(max(all_floors)) + 1))
            if self.elevator_trajectories:
                plt.legend(loc='upper right', fontsize=10)

            if output_filename:
                plt.savefig(output_filename, dpi=150, bbox_inches='tight')
                print(f"Trajectory diagram saved to: {output_filename}")
            if show:
                plt.show()
            return fig
        except (OSError, ValueError) as e:
            print(f"ERROR: Could not plot trajectory diagram: {e}")
            return None

    def print_summary(self):
        print("\n" + "=" * 60)
        print("   SIMULATION SUMMARY")
        print("=" * 60)

        counts = {}
        for event in self.event_log:
            counts[event['type']] = counts.get(event['type'], 0) + 1
        for event_type in sorted(counts):
            print(f"  {event_type:<28} {counts[event_type]:>6}")

        print("-" * 60)
        for elevator_id in sorted(self.elevator_trajectories):
            moves = max(len(self.elevator_trajectories[elevator_id]) - 1, 0)
            print(f"  Elevator {elevator_id}: {moves} moves")

        average = self.get_average_service_time()
        if average is not None:
            longest = max(t for _, _, t in self.hall_call_service_times)
            print(f"  Hall calls served: {len(self.hall_call_service_times)} "
                  f"(avg {average:.2f}s, max {longest:.2f}s)")
        print(f"  Hall calls still open: {len(self.open_hall_calls)}")
        print("=" * 60)
