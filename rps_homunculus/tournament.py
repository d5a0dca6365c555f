"""Gauntlet: the computer opponent against every scripted bot.

Supports parallel execution via ProcessPoolExecutor for multi-core speedup.
Supports optional on_match_done callback for live progress tracking.
"""

import os
from typing import Optional, Callable
from concurrent.futures import ProcessPoolExecutor, as_completed

from .algorithms import ALL_ALGORITHM_CLASSES, Algorithm, get_algorithm_by_name, get_all_algorithms, get_opponent
from .engine import CLASSIC, Ruleset, get_ruleset
from .game import DEFAULT_MAX_SCORE, MatchReport, run_match


# ---------------------------------------------------------------------------
# Worker function for parallel execution (must be top-level for pickling)
# ---------------------------------------------------------------------------

def _run_match_worker(
    algo_name: str,
    rules_name: str,
    max_score: int,
    seed: Optional[int],
    opponent_name: str = "homunculus",
    max_rounds: int = 1000,
) -> MatchReport:
    """Run a single match in a worker process.

    Creates fresh instances inside the worker so no stateful objects cross
    process boundaries.
    """
    rules = get_ruleset(rules_name)
    algo = get_algorithm_by_name(algo_name, rules)
    opponent = get_opponent(opponent_name, rules)
    return run_match(
        algo, rules=rules, max_score=max_score, seed=seed,
        max_rounds=max_rounds, opponent=opponent, record_moves=False,
    )


def gauntlet(
    pool: Optional[list[Algorithm]] = None,
    matches: int = 20,
    rules: Ruleset = CLASSIC,
    max_score: int = DEFAULT_MAX_SCORE,
    seed: Optional[int] = None,
    opponent_name: str = "homunculus",
    parallel: bool = True,
    on_match_done: Optional[Callable[[int, int, MatchReport], None]] = None,
) -> list[MatchReport]:
    """Play ``matches`` matches against each bot in ``pool``.

    Each match is rebuilt from the bot's name inside the worker, so ``pool``
    may only hold registry bots (``ALL_ALGORITHM_CLASSES``). Anything else
    raises ``ValueError`` before a match is played.

    Args:
        parallel: If True, run matches across multiple CPU cores.
        on_match_done: Optional callback(completed, total, report) called
                       after each match finishes. Used for progress tracking.
    """
    if matches < 1:
        raise ValueError(f"matches must be at least 1, got {matches}")
    if pool is None:
        pool = get_all_algorithms(rules)
    unknown = [bot.name for bot in pool if type(bot) not in ALL_ALGORITHM_CLASSES]
    if unknown:
        raise ValueError(f"Only registry bots can play a gauntlet, got: {', '.join(unknown)}")

    jobs = []
    for i, bot in enumerate(pool):
        for k in range(matches):
            match_seed = (seed * 10000 + i * matches + k) if seed is not None else None
            jobs.append((bot.name, rules.name, max_score, match_seed, opponent_name))

    if parallel and len(jobs) > 1:
        return _run_parallel(jobs, on_match_done=on_match_done)

    results = []
    for i, job in enumerate(jobs):
        report = _run_match_worker(*job)
        results.append(report)
        if on_match_done:
            on_match_done(i + 1, len(jobs), report)
    return results


# ---------------------------------------------------------------------------
# Parallel execution helper
# ---------------------------------------------------------------------------

def _run_parallel(
    jobs: list[tuple],
    on_match_done: Optional[Callable[[int, int, MatchReport], None]] = None,
) -> list[MatchReport]:
    """Run a batch of matches in parallel using ProcessPoolExecutor.

    Results keep the order jobs were submitted in. Calls
    on_match_done(completed_count, total, report) as each future completes.
    """
    max_workers = min(os.cpu_count() or 4, len(jobs))
    total = len(jobs)

    results: list[Optional[MatchReport]] = [None] * total
    completed = 0

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {
            executor.submit(_run_match_worker, *job): idx
            for idx, job in enumerate(jobs)
        }

        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            report = future.result()
            results[idx] = report
            completed += 1

            if on_match_done:
                on_match_done(completed, total, report)

    return results  # type: ignore[return-value]
