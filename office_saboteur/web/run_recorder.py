"""
Run recorder that appends room events to a JSONL file.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Iterable, NamedTuple, Optional
from threading import Lock


class RecordedEvent(NamedTuple):
    """One room event as queued by the EventEmitter."""
    timestamp: str
    event_type: str
    data: Dict[str, Any]

    def to_json(self, sequence: int) -> str:
        return json.dumps({
            "timestamp": self.timestamp,
            "event_type": self.event_type,
            "data": self.data,
            "sequence": sequence
        })


class RunRecorder:
    """
    Writes one server run to `<runs_dir>/<run_name>/`.

    `events.jsonl` gets one line per event with a run-wide sequence number;
    `metadata.json` holds whatever the entry point saves (the config).
    """

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.run_dir: Optional[Path] = None
        self.events_file: Optional[Path] = None
        self.metadata_file: Optional[Path] = None
        self._lock = Lock()
        self._sequence = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """Start a run directory, named `server_<timestamp>` unless given. Returns the name."""
        run_name = run_name or datetime.now().strftime("server_%Y%m%d_%H%M%S")

        self.run_dir = self.runs_dir / run_name
        self.run_dir.mkdir(exist_ok=True)
        self.events_file = self.run_dir / "events.jsonl"
        self.metadata_file = self.run_dir / "metadata.json"
        self._sequence = 0
        return run_name

    def record_batch(self, events: Iterable[RecordedEvent]) -> int:
        """
        Append events in order with a single open of the events file.

        Returns the number of lines written; nothing is written before
        create_run.
        """
        if not self.events_file:
            return 0

        with self._lock:
            lines = []
            for event in events:
                lines.append(event.to_json(self._sequence))
                self._sequence += 1
            if lines:
                with open(self.events_file, 'a') as f:
                    f.write("\n".join(lines) + "\n")
        return len(lines)

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        self.record_batch([RecordedEvent(datetime.now().isoformat(), event_type, data)])

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        if not self.metadata_file:
            return

        with self._lock:
            with open(self.metadata_file, 'w') as f:
                json.dump(metadata, f, indent=2)

    @property
    def event_count(self) -> int:
        return self._sequence
