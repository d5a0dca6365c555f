"""Move choosers: the human at the console, the homunculus, and scripted bots."""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
import random
from typing import Callable, Optional

from .engine import CLASSIC, Move, Round, Ruleset, determine_winner
from .homunculus import Ledger, calculate_weights, update_ledger, weighted_choice


class Algorithm(ABC):
    """Base class for anything that picks a move each round."""

    def __init__(self, rules: Ruleset = CLASSIC, rng: Optional[random.Random] = None):
        self.rules = rules
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.reset()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def choose(self, round_num: int, my_history: list[Move], opp_history: list[Move]) -> Move:
        ...

    def observe(self, rnd: Round):
        """Called once every round is resolved. Learners override this."""
        pass

    def reset(self):
        """Reset any internal state between matches."""
        pass

    def __repr__(self):
        return f"<{self.name}>"


@dataclass
class Player:
    """A seat at the table. Behaviour comes from the attached algorithm."""
    name: str
    algorithm: Algorithm
    move: Optional[Move] = None

    def choose(self, round_num: int, my_history: list[Move], opp_history: list[Move]) -> Move:
        self.move = self.algorithm.choose(round_num, my_history, opp_history)
        return self.move


# ---------------------------------------------------------------------------
# Human (console)
# ---------------------------------------------------------------------------

class Human(Algorithm):
    """Asks for a move on the console until a valid one is typed."""
    name = "Human"

    def __init__(
        self,
        rules: Ruleset = CLASSIC,
        rng: Optional[random.Random] = None,
        input_fn: Callable[[], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.input_fn = input_fn
        self.output_fn = output_fn
        super().__init__(rules, rng)

    def choose(self, round_num, my_history, opp_history):
        valid = self.rules.values
        while True:
            self.output_fn(f"Please choose {self.rules.choices_text()}:")
            choice = self.input_fn().strip().lower()
            if choice in valid:
                return Move(choice)
            self.output_fn("Sorry, invalid choice.")


# ---------------------------------------------------------------------------
# Computer opponents
# ---------------------------------------------------------------------------

class RandomComputer(Algorithm):
    """Uniformly random opponent with no memory."""
    name = "Random Computer"

    def choose(self, round_num, my_history, opp_history):
        return self.rng.choice(self.rules.moves)


class Homunculus(Algorithm):
    """Adaptive opponent that learns which counters work against you.

    Keeps a ledger seeded with two of every move. After each round it adds
    the move it should have played: its own move after a win, otherwise one
    of the moves that beat yours. Its next move is sampled from the ledger's
    frequencies.
    """
    name = "Homunculus"

    def reset(self):
        self.ledger = Ledger(self.rules)
        self.last_weights: Optional[dict[Move, float]] = None

    def choose(self, round_num, my_history, opp_history):
        self.last_weights = calculate_weights(self.ledger, self.rules, self.rng)
        return weighted_choice(self.last_weights, self.rules, self.rng)

    def observe(self, rnd: Round):
        update_ledger(self.ledger, rnd, self.rules, self.rng)


# ---------------------------------------------------------------------------
# Scripted bots (used to exercise the homunculus in headless matches)
# ---------------------------------------------------------------------------

class AlwaysRock(Algorithm):
    """Always chooses Rock."""
    name = "Always Rock"
    def choose(self, round_num, my_history, opp_history):
        return Move.ROCK


class AlwaysPaper(Algorithm):
    """Always chooses Paper."""
    name = "Always Paper"
    def choose(self, round_num, my_history, opp_history):
        return Move.PAPER


class AlwaysScissors(Algorithm):
    """Always chooses Scissors."""
    name = "Always Scissors"
    def choose(self, round_num, my_history, opp_history):
        return Move.SCISSORS


class PureRandom(Algorithm):
    """Chooses a move completely at random.

    Unexploitable in the long run, so the homunculus should do no better
    than break even against it.
    """
    name = "Pure Random"
    def choose(self, round_num, my_history, opp_history):
        return self.rng.choice(self.rules.moves)


class Cycle(Algorithm):
    """Cycles through the moves in canonical order: R, P, S, R, P, S..."""
    name = "Cycle"
    def choose(self, round_num, my_history, opp_history):
        moves = self.rules.moves
        return moves[round_num % len(moves)]


class TitForTat(Algorithm):
    """Repeats the opponent's last move (Rock on the first round)."""
    name = "Tit-for-Tat"
    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return Move.ROCK
        return opp_history[-1]


class AntiTitForTat(Algorithm):
    """Plays a move that beats the opponent's last move."""
    name = "Anti-Tit-for-Tat"
    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(self.rules.moves)
        return self.rng.choice(self.rules.beaten_by(opp_history[-1]))


class FrequencyAnalyzer(Algorithm):
    """Counters the opponent's most frequent move.

    **Logic**: `Counter(opp_history).most_common(1)`
    """
    name = "Frequency Analyzer"
    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(self.rules.moves)
        most_common = Counter(opp_history).most_common(1)[0][0]
        return self.rng.choice(self.rules.beaten_by(most_common))


class WinStayLoseShift(Algorithm):
    """Pavlov: stay after a win or a draw, otherwise switch to a counter of
    the opponent's last move."""
    name = "Win-Stay-Lose-Shift"
    def choose(self, round_num, my_history, opp_history):
        if not my_history:
            return self.rng.choice(self.rules.moves)
        my_last = my_history[-1]
        opp_last = opp_history[-1]
        if determine_winner(my_last, opp_last, self.rules) >= 0:
            return my_last
        return self.rng.choice(self.rules.beaten_by(opp_last))


ALL_ALGORITHM_CLASSES = [
    AlwaysRock,
    AlwaysPaper,
    AlwaysScissors,
    PureRandom,
    Cycle,
    TitForTat,
    AntiTitForTat,
    FrequencyAnalyzer,
    WinStayLoseShift,
]

OPPONENT_CLASSES = {
    "homunculus": Homunculus,
    "random": RandomComputer,
}


def get_all_algorithms(rules: Ruleset = CLASSIC) -> list[Algorithm]:
    """Return fresh instances of all scripted bots."""
    return [cls(rules) for cls in ALL_ALGORITHM_CLASSES]


def get_algorithm_by_name(name: str, rules: Ruleset = CLASSIC) -> Algorithm:
    """Get a single scripted bot by name (case-insensitive)."""
    name_lower = name.lower()
    for cls in ALL_ALGORITHM_CLASSES:
        if cls.name.lower() == name_lower:
            return cls(rules)
    available = ", ".join(cls.name for cls in ALL_ALGORITHM_CLASSES)
    raise ValueError(f"Unknown algorithm: '{name}'. Available: {available}")


def get_opponent(name: str, rules: Ruleset = CLASSIC) -> Algorithm:
    """Build the computer opponent (``homunculus`` or ``random``).

    No RNG is taken here: ``Match`` seeds the opponent from its own seed.
    """
    try:
        cls = OPPONENT_CLASSES[name.lower()]
    except KeyError:
        available = ", ".join(OPPONENT_CLASSES)
        raise ValueError(f"Unknown opponent: '{name}'. Available: {available}") from None
    return cls(rules)
