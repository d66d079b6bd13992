# Orchestrator: repeated randomized attempts feeding a bounded leaderboard
from __future__ import annotations

import math
import os
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import multiprocessing as mp

from config import CFG, seed_from_config
from models import Board, Tile
from tiles import validate_universe
from progress import (
    set_status, set_grid, set_attempt, set_attempts, set_progress_pct,
    set_total_cells, set_best_filled, set_elapsed, set_message, start_timer,
    log_attempt_detail,
)
from io_files import write_board_export, write_history
from solver.attempt import run_attempt
from solver.leaderboard import Leaderboard

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# progress is persisted to disk; don't rewrite it after every attempt
_PROGRESS_INTERVAL = 0.25


@dataclass
class RunResult:
    leaderboard: Leaderboard
    attempts: int
    elapsed: float
    seed: Optional[int]
    exported: List[str] = field(default_factory=list)

    @property
    def best(self) -> Optional[Board]:
        return self.leaderboard.best


@dataclass
class _AttemptParams:
    width: int
    height: int
    seed_xy: Tuple[int, int]
    seed_tile_id: int
    seed_rotation: int


def _params_from_cfg(width: Optional[int], height: Optional[int]) -> _AttemptParams:
    return _AttemptParams(
        width=CFG.GRID_W if width is None else int(width),
        height=CFG.GRID_H if height is None else int(height),
        seed_xy=(CFG.SEED_X, CFG.SEED_Y),
        seed_tile_id=CFG.SEED_TILE_ID,
        seed_rotation=CFG.SEED_ROTATION,
    )


def _attempt_seeds(run_seed: Optional[int]) -> Iterator[int]:
    """Per-attempt seeds; a fixed run seed yields the same sequence every time."""
    master = random.Random(run_seed)
    while True:
        yield master.getrandbits(32)


def _one_attempt(universe: Sequence[Tile], params: _AttemptParams, number: int, seed: int) -> Board:
    return run_attempt(
        universe,
        width=params.width,
        height=params.height,
        seed_xy=params.seed_xy,
        seed_tile_id=params.seed_tile_id,
        seed_rotation=params.seed_rotation,
        attempt=number,
        seed=seed,
        validate=False,
    )


# Worker state lives at module level so the spawn start method can pickle it
_WORKER_UNIVERSE: Optional[List[Tile]] = None
_WORKER_PARAMS: Optional[_AttemptParams] = None


def _init_worker(universe: List[Tile], params: _AttemptParams) -> None:
    global _WORKER_UNIVERSE, _WORKER_PARAMS
    _WORKER_UNIVERSE = universe
    _WORKER_PARAMS = params


def _worker_attempt(job: Tuple[int, int]) -> Board:
    number, seed = job
    return _one_attempt(_WORKER_UNIVERSE, _WORKER_PARAMS, number, seed)


def _export(board: Board, base_dir: str) -> List[str]:
    paths = [write_board_export(board, base_dir)]
    if CFG.EXPORT_HISTORY:
        paths.append(write_history(board, base_dir))
    return paths


def run_attempts(
    tiles: Sequence[Tile],
    *,
    seconds: Optional[float] = None,
    max_attempts: Optional[int] = None,
    workers: Optional[int] = None,
    seed: Optional[int] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    export: bool = True,
    base_dir: Optional[str] = None,
    on_board: Optional[Callable[[Board], None]] = None,
) -> RunResult:
    """
    Run attempts until the time box or the attempt cap is reached.

    ``seconds <= 0`` disables the time box and ``max_attempts <= 0`` the cap;
    with both disabled a single attempt runs.  The tile universe is validated
    once up front (``TileSetError`` on failure) and never mutated.  A
    non-finite ``seconds`` raises ``ValueError``.
    """
    seconds = CFG.RUN_SECONDS if seconds is None else float(seconds)
    if not math.isfinite(seconds):
        raise ValueError(f"time box must be a finite number of seconds, got {seconds}")
    max_attempts = CFG.MAX_ATTEMPTS if max_attempts is None else int(max_attempts)
    workers = max(1, CFG.WORKERS if workers is None else int(workers))
    if seed is None:
        seed = seed_from_config()
    base_dir = base_dir or BASE_DIR
    if seconds <= 0 and max_attempts <= 0:
        max_attempts = 1

    params = _params_from_cfg(width, height)
    validate_universe(tiles, params.width, params.height, params.seed_tile_id, params.seed_xy)
    universe = [t.copy() for t in tiles]

    board_label = f"{params.width} × {params.height}"
    total_cells = params.width * params.height
    leaderboard = Leaderboard(CFG.LEADERBOARD_SIZE)
    exported: List[str] = []

    log_attempt_detail(
        "Run setup",
        grid=board_label,
        tiles=len(universe),
        seconds=seconds if seconds > 0 else None,
        max_attempts=max_attempts if max_attempts > 0 else None,
        workers=workers,
        seed=seed,
    )
    set_status("Solving")
    set_grid(board_label)
    set_total_cells(total_cells)
    set_best_filled(0)
    set_progress_pct(0.0)
    start_timer()

    t0 = time.time()
    count = 0
    last_push = 0.0

    def _keep_going() -> bool:
        if max_attempts > 0 and count >= max_attempts:
            return False
        if seconds > 0 and time.time() - t0 >= seconds:
            return False
        return True

    def _record(board: Board) -> None:
        nonlocal count, last_push
        count += 1
        _admitted, leader = leaderboard.offer(board)
        if on_board is not None:
            on_board(board)
        if leader:
            set_attempt(f"#{board.attempt}")
            set_best_filled(board.peak_filled)
            log_attempt_detail(
                "New best",
                attempt=board.attempt,
                seed=board.seed,
                peak=board.peak_filled,
                total=total_cells,
                placements=board.stats.get("placements"),
            )
            if export and board.peak_filled >= CFG.EXPORT_MIN_FILLED:
                exported.extend(_export(board, base_dir))
        now = time.time()
        if leader or now - last_push >= _PROGRESS_INTERVAL:
            last_push = now
            set_attempts(count)
            if seconds > 0:
                set_progress_pct(100.0 * (now - t0) / seconds)
            elif max_attempts > 0:
                set_progress_pct(100.0 * count / max_attempts)

    seeds = _attempt_seeds(seed)

    if workers == 1:
        while _keep_going():
            _record(_one_attempt(universe, params, count + 1, next(seeds)))
    else:
        ctx = mp.get_context("spawn")
        with ctx.Pool(workers, initializer=_init_worker, initargs=(universe, params)) as pool:
            while _keep_going():
                batch = workers
                if max_attempts > 0:
                    batch = min(batch, max_attempts - count)
                jobs = [(count + i + 1, next(seeds)) for i in range(batch)]
                # ordered results keep seeded runs reproducible
                for board in pool.imap(_worker_attempt, jobs):
                    _record(board)

    elapsed = time.time() - t0
    set_attempts(count)
    set_elapsed(elapsed)
    set_message(f"{count} attempts, best {leaderboard.best_filled}/{total_cells}")
    log_attempt_detail(
        "Run summary",
        attempts=count,
        elapsed=f"{elapsed:.2f}s",
        scores=",".join(str(s) for s in leaderboard.scores()),
    )
    return RunResult(leaderboard, count, elapsed, seed, exported)


def leaderboard_summary(result: RunResult) -> Dict[str, object]:
    best = result.best
    return {
        "attempts": result.attempts,
        "elapsed": round(result.elapsed, 3),
        "seed": result.seed,
        "scores": result.leaderboard.scores(),
        "best_attempt": best.attempt if best else None,
        "best_seed": best.seed if best else None,
    }


__all__ = ["RunResult", "run_attempts", "leaderboard_summary"]
