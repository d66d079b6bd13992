# solver/leaderboard.py
from __future__ import annotations

from typing import List, Optional, Tuple

from models import Board


class Leaderboard:
    """Best ``size`` boards by peak filled count; earlier boards win ties."""

    def __init__(self, size: int = 5):
        self.size = max(1, int(size))
        self.entries: List[Board] = []

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def best(self) -> Optional[Board]:
        return self.entries[0] if self.entries else None

    @property
    def best_filled(self) -> int:
        return self.entries[0].peak_filled if self.entries else 0

    def offer(self, board: Board) -> Tuple[bool, bool]:
        """Return (admitted, new_leader)."""
        previous = self.best_filled if self.entries else -1
        self.entries.append(board)
        self.entries.sort(key=lambda b: b.peak_filled, reverse=True)
        del self.entries[self.size:]
        admitted = any(b is board for b in self.entries)
        return admitted, admitted and board.peak_filled > previous

    def scores(self) -> List[int]:
        return [b.peak_filled for b in self.entries]


__all__ = ["Leaderboard"]
