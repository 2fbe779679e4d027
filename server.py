"""
Entry point for the Office Saboteur room server.
"""

import argparse

from dotenv import load_dotenv

from office_saboteur.config import load_config
from office_saboteur.web import EventEmitter, GameServer, RunRecorder


def main():
    """Entry point for the game server."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Start the Office Saboteur room server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python server.py                          # Start server on default port 3000
  python server.py --port 8080              # Start server on port 8080
  python server.py --config config.yaml     # Load settings from YAML
  python server.py --record                 # Record room events to runs/
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML config file"
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port for the server (overrides config and PORT)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (overrides config and HOST)"
    )
    parser.add_argument(
        "--record",
        action="store_true",
        help="Record room events to the runs directory"
    )

    args = parser.parse_args()

    config = load_config(args.config)
    if args.port is not None:
        config.port = args.port
    if args.host is not None:
        config.host = args.host
    if args.record:
        config.record_events = True

    event_emitter = None
    if config.record_events:
        run_recorder = RunRecorder(runs_dir=config.runs_dir)
        run_name = run_recorder.create_run()
        run_recorder.save_metadata({"config": vars(config)})
        event_emitter = EventEmitter(run_recorder)
        print(f"Recording room events to: {config.runs_dir}/{run_name}/")

    server = GameServer(config=config, event_emitter=event_emitter)
    server.start()


if __name__ == "__main__":
    main()
