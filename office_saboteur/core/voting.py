"""
Meeting ballot box and tally algorithm.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

# Default meeting length in ms. Advisory only: nothing closes a meeting early.
MEETING_DURATION_MS = 120000


@dataclass
class VotingResult:
    """Outcome of a meeting tally."""
    eliminated: Optional[str] = None
    vote_count: Dict[str, int] = field(default_factory=dict)  # {target_id: votes}
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eliminated": self.eliminated,
            "voteCount": dict(self.vote_count),
            "skipped": self.skipped,
        }


@dataclass
class VotingSession:
    """Ballot box for one meeting. A vote with target None is a skip."""
    reason: str
    start_time: int
    duration: int = MEETING_DURATION_MS
    votes: Dict[str, Optional[str]] = field(default_factory=dict)  # {voter_id: target_id}

    def record_vote(self, voter_id: str, target_id: Optional[str]) -> None:
        """Record a vote; a later vote from the same voter replaces the earlier one."""
        self.votes[voter_id] = target_id

    def has_quorum(self, alive_count: int) -> bool:
        """True once the number of recorded votes equals the number of living players."""
        return len(self.votes) == alive_count

    def get_vote_counts(self) -> Dict[str, int]:
        """Votes per target, keyed in the order each target first received a vote."""
        counts: Dict[str, int] = {}
        for target_id in self.votes.values():
            if target_id is None:
                continue
            counts[target_id] = counts.get(target_id, 0) + 1
        return counts

    def tally(self) -> VotingResult:
        """
        Determine who is eliminated.

        The leader only changes when a later target has strictly more votes,
        so on a tie the target counted first keeps the lead.
        """
        counts = self.get_vote_counts()

        max_votes = 0
        eliminated = None
        for target_id, votes in counts.items():
            if votes > max_votes:
                max_votes = votes
                eliminated = target_id

        skipped = sum(1 for target_id in self.votes.values() if target_id is None)
        return VotingResult(eliminated=eliminated, vote_count=counts, skipped=skipped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason,
            "votes": dict(self.votes),
            "startTime": self.start_time,
            "duration": self.duration,
        }
