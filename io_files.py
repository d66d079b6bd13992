"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import json
import os

from config import CFG
from models import Board


def _resolve_output_dir(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute directory where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_board_export(board: Board, base_dir: str) -> str:
    """Write the board's peak grid as text, named after its peak filled count."""

    directory = _resolve_output_dir(base_dir, CFG.EXPORT_DIR, "outputs")
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{board.peak_filled}.txt")

    with open(path, "w", encoding="utf-8") as f:
        f.write(board.export_peak())
    return path


def write_history(board: Board, base_dir: str) -> str:
    """Write the placement history up to the board's peak as a JSON array."""

    directory = _resolve_output_dir(base_dir, CFG.HISTORY_DIR, "history-output")
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{board.peak_filled}.json")

    upto = board.peak_history_length or None
    with open(path, "w", encoding="utf-8") as f:
        json.dump(board.history_records(upto), f, indent=2)
    return path


__all__ = ["write_board_export", "write_history"]
