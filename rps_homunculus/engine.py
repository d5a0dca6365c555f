"""Move domain, outcome resolution and match bookkeeping."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class Move(Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"
    LIZARD = "lizard"
    SPOCK = "spock"


class RulesetError(ValueError):
    """Raised when a beats table breaks the one-winner-per-pair rule."""


class MatchOverError(RuntimeError):
    """Raised when a round is played after the match has ended."""


# Canonical enumeration order. Sampling walks moves in this order.
CANONICAL_ORDER = tuple(Move)


@dataclass(frozen=True)
class Ruleset:
    """A closed set of moves plus the beats relation between them.

    ``beats[m]`` is the set of moves that ``m`` defeats. The losing side of
    the relation is derived once, at construction, so that every lookup
    during play is a plain dict access.
    """
    name: str
    moves: tuple
    beats: dict
    _beaten_by: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        moves = tuple(sorted(self.moves, key=CANONICAL_ORDER.index))
        beats = {m: frozenset(self.beats.get(m, ())) for m in moves}
        object.__setattr__(self, "moves", moves)
        object.__setattr__(self, "beats", beats)
        self._validate()
        beaten_by = {
            m: tuple(other for other in moves if m in beats[other])
            for m in moves
        }
        object.__setattr__(self, "_beaten_by", beaten_by)

    def _validate(self):
        if len(self.moves) < 3 or len(self.moves) % 2 == 0:
            raise RulesetError(
                f"{self.name}: need an odd number of moves (>= 3), got {len(self.moves)}"
            )
        per_move = (len(self.moves) - 1) // 2
        domain = set(self.moves)
        for move, defeated in self.beats.items():
            if move in defeated:
                raise RulesetError(f"{self.name}: {move.value} beats itself")
            outside = defeated - domain
            if outside:
                names = ", ".join(sorted(m.value for m in outside))
                raise RulesetError(f"{self.name}: {move.value} beats unknown move(s) {names}")
            if len(defeated) != per_move:
                raise RulesetError(
                    f"{self.name}: {move.value} beats {len(defeated)} moves, expected {per_move}"
                )
        for i, a in enumerate(self.moves):
            for b in self.moves[i + 1:]:
                if (b in self.beats[a]) == (a in self.beats[b]):
                    raise RulesetError(
                        f"{self.name}: exactly one of {a.value}/{b.value} must beat the other"
                    )

    def beaten_by(self, move: Move) -> tuple:
        """Moves that defeat ``move``, in canonical order."""
        return self._beaten_by[move]

    def parse(self, text: str) -> Move:
        """Return the move named ``text`` if it belongs to this ruleset."""
        try:
            move = Move(text)
        except ValueError:
            raise ValueError(f"Unknown move: '{text}'. Valid moves: {self.choices_text()}") from None
        if move not in self.beats:
            raise ValueError(f"'{text}' is not played in {self.name}. Valid moves: {self.choices_text()}")
        return move

    @property
    def values(self) -> list[str]:
        return [m.value for m in self.moves]

    def choices_text(self) -> str:
        """'rock, paper, or scissors' style listing for prompts."""
        values = self.values
        return ", ".join(values[:-1]) + ", or " + values[-1]


CLASSIC = Ruleset(
    name="classic",
    moves=(Move.ROCK, Move.PAPER, Move.SCISSORS),
    beats={
        Move.ROCK: {Move.SCISSORS},
        Move.SCISSORS: {Move.PAPER},
        Move.PAPER: {Move.ROCK},
    },
)

LIZARD_SPOCK = Ruleset(
    name="rpsls",
    moves=tuple(Move),
    beats={
        Move.ROCK: {Move.SCISSORS, Move.LIZARD},
        Move.PAPER: {Move.ROCK, Move.SPOCK},
        Move.SCISSORS: {Move.PAPER, Move.LIZARD},
        Move.LIZARD: {Move.PAPER, Move.SPOCK},
        Move.SPOCK: {Move.ROCK, Move.SCISSORS},
    },
)

RULESETS = {
    "classic": CLASSIC,
    "rpsls": LIZARD_SPOCK,
    "lizard-spock": LIZARD_SPOCK,
}


def get_ruleset(name: str) -> Ruleset:
    """Look up a ruleset by name (case-insensitive)."""
    try:
        return RULESETS[name.lower()]
    except KeyError:
        available = ", ".join(RULESETS)
        raise ValueError(f"Unknown ruleset: '{name}'. Available: {available}") from None


def determine_winner(move_a: Move, move_b: Move, rules: Ruleset = CLASSIC) -> int:
    """Return 1 if A wins, -1 if B wins, 0 for draw."""
    if move_a == move_b:
        return 0
    if move_b in rules.beats[move_a]:
        return 1
    if move_a in rules.beats[move_b]:
        return -1
    raise RulesetError(f"{rules.name}: no winner between {move_a.value} and {move_b.value}")


class Winner(Enum):
    HUMAN = "human"
    COMPUTER = "computer"
    TIE = "tie"

    @classmethod
    def from_outcome(cls, outcome: int) -> "Winner":
        """Map a human-perspective ``determine_winner`` result."""
        if outcome == 1:
            return cls.HUMAN
        if outcome == -1:
            return cls.COMPUTER
        return cls.TIE


class MatchOutcome(Enum):
    HUMAN = "human"
    COMPUTER = "computer"
    FORFEIT = "forfeit"


@dataclass(frozen=True)
class Round:
    """One resolved exchange of moves."""
    number: int
    human_move: Move
    computer_move: Move
    winner: Winner

    def to_dict(self) -> dict:
        return {
            "round": self.number,
            "human_move": self.human_move.value,
            "computer_move": self.computer_move.value,
            "winner": self.winner.value,
        }


@dataclass
class Scoreboard:
    """Cumulative scores and round history of a single match."""
    human_score: int = 0
    computer_score: int = 0
    history: list = field(default_factory=list)

    def record_round(self, rnd: Round) -> "Scoreboard":
        self.history.append(rnd)
        if rnd.winner is Winner.HUMAN:
            self.human_score += 1
        elif rnd.winner is Winner.COMPUTER:
            self.computer_score += 1
        return self

    def is_complete(self, threshold: int) -> bool:
        return self.human_score == threshold or self.computer_score == threshold

    def winner(self, threshold: int) -> MatchOutcome:
        if self.human_score == threshold:
            return MatchOutcome.HUMAN
        if self.computer_score == threshold:
            return MatchOutcome.COMPUTER
        return MatchOutcome.FORFEIT

    @property
    def ties(self) -> int:
        return len(self.history) - self.human_score - self.computer_score

    @property
    def last_round(self) -> Optional[Round]:
        return self.history[-1] if self.history else None

    def to_dict(self) -> dict:
        return {
            "human_score": self.human_score,
            "computer_score": self.computer_score,
            "ties": self.ties,
            "rounds": [r.to_dict() for r in self.history],
        }
