"""The homunculus: a frequency-learning move ledger.

The ledger collects, one entry per round, the move the computer *should*
have played. The computer's next move is drawn from the ledger's move
frequencies, so counters that keep working get picked more often.

    computer_move = weighted_choice(calculate_weights(ledger, rules, rng), rules, rng)

The ledger is the only state that survives between rounds. Weights are
rebuilt from it every time they are needed.
"""

import random

import numpy as np

from .engine import Move, Round, Ruleset, Winner

SEED_COPIES = 2


class Ledger:
    """Append-only multiset of moves, pre-seeded with every move twice."""
    __slots__ = ('_rules', '_entries')

    def __init__(self, rules: Ruleset):
        self._rules = rules
        self._entries: list[Move] = [m for m in rules.moves for _ in range(SEED_COPIES)]

    def append(self, move: Move):
        if move not in self._rules.beats:
            raise ValueError(f"{move.value} is not played in {self._rules.name}")
        self._entries.append(move)

    def counts(self) -> dict[Move, int]:
        """Occurrences of each move, in canonical order."""
        index = {m: i for i, m in enumerate(self._rules.moves)}
        codes = np.fromiter((index[m] for m in self._entries), dtype=np.int64, count=len(self._entries))
        tally = np.bincount(codes, minlength=len(self._rules.moves))
        return {m: int(tally[i]) for i, m in enumerate(self._rules.moves)}

    @property
    def rules(self) -> Ruleset:
        return self._rules

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self):
        return f"Ledger({[m.value for m in self._entries]!r})"


def update_ledger(ledger: Ledger, last_round: Round, rules: Ruleset, rng: random.Random) -> Move:
    """Append the move that would have won ``last_round`` and return it.

    A computer win reinforces the computer's own move. Human wins and ties
    both add one of the moves that beat the human's move, picked uniformly.
    """
    if last_round.winner is Winner.COMPUTER:
        move = last_round.computer_move
    else:
        counters = rules.beaten_by(last_round.human_move)
        move = counters[rng.randrange(len(counters))]
    ledger.append(move)
    return move


def calculate_weights(ledger: Ledger, rules: Ruleset, rng: random.Random) -> dict[Move, float]:
    """Turn ledger frequencies into a distribution that sums to exactly 1.

    Each weight is ``count / len(ledger)``. Whatever rounding leaves over is
    added to one move chosen at random.
    """
    total = len(ledger)
    counts = ledger.counts()
    weights = {m: counts[m] / total for m in rules.moves}
    diff = 1.0 - sum(weights.values())
    weights[rng.choice(rules.moves)] += diff
    return weights


def weighted_choice(weights: dict[Move, float], rules: Ruleset, rng: random.Random) -> Move:
    """Draw one move from ``weights``.

    Walks the moves in canonical order and returns the first one whose
    running total reaches the draw. Falls back to the last move if rounding
    keeps the running total below the draw.
    """
    r = rng.random()
    running = 0.0
    for move in rules.moves:
        running += weights.get(move, 0.0)
        if r <= running:
            return move
    return rules.moves[-1]
