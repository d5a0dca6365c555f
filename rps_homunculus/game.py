"""Match driver: the per-round API, the console loop, and headless matches."""

from dataclasses import dataclass, field
import random
from typing import Callable, Optional

from .algorithms import Algorithm, Homunculus, Human, Player
from .engine import (
    CLASSIC,
    MatchOutcome,
    MatchOverError,
    Move,
    Round,
    Ruleset,
    Scoreboard,
    Winner,
    determine_winner,
)
from .stats import MATCH_MESSAGES, print_history, print_round, print_scores, print_weights

DEFAULT_MAX_SCORE = 5


class Match:
    """One match between a human seat and a computer opponent.

    The computer's algorithm (the homunculus unless told otherwise) gets its
    own RNG derived from ``seed`` so a seeded match replays exactly.
    """

    def __init__(
        self,
        rules: Ruleset = CLASSIC,
        max_score: int = DEFAULT_MAX_SCORE,
        opponent: Optional[Algorithm] = None,
        seed: Optional[int] = None,
    ):
        if not isinstance(max_score, int) or isinstance(max_score, bool) or max_score < 1:
            raise ValueError(f"max_score must be a positive integer, got {max_score!r}")
        self.rules = rules
        self.max_score = max_score
        self.seed = seed

        master_rng = random.Random(seed)
        if opponent is None:
            opponent = Homunculus(rules)
        elif opponent.rules is not rules:
            raise ValueError(
                f"{opponent.name} plays {opponent.rules.name}, not {rules.name}"
            )
        opponent.rng = random.Random(master_rng.randint(0, 2**31))
        opponent.reset()
        self.computer = Player("Computer", opponent)
        self.board = Scoreboard()
        self.resigned = False

        self._human_moves: list[Move] = []
        self._computer_moves: list[Move] = []

    @property
    def opponent(self) -> Algorithm:
        return self.computer.algorithm

    @property
    def history(self) -> tuple:
        return tuple(self.board.history)

    @property
    def human_moves(self) -> list[Move]:
        return list(self._human_moves)

    @property
    def computer_moves(self) -> list[Move]:
        return list(self._computer_moves)

    @property
    def round_num(self) -> int:
        return len(self.board.history)

    @property
    def is_over(self) -> bool:
        return self.resigned or self.is_complete()

    def choose_computer_move(self) -> Move:
        return self.computer.choose(self.round_num, self._computer_moves, self._human_moves)

    def play_round(self, human_move: Move, computer_move: Move) -> Round:
        """Resolve one round, let the opponent learn from it, then record it.

        If the opponent fails to learn, nothing is recorded.
        """
        if self.is_over:
            raise MatchOverError("The match is over; start a new one to keep playing")
        for move in (human_move, computer_move):
            if move not in self.rules.beats:
                raise ValueError(f"{move!r} is not played in {self.rules.name}")

        outcome = determine_winner(human_move, computer_move, self.rules)
        rnd = Round(
            number=self.round_num + 1,
            human_move=human_move,
            computer_move=computer_move,
            winner=Winner.from_outcome(outcome),
        )
        self.opponent.observe(rnd)
        self.board.record_round(rnd)
        self._human_moves.append(human_move)
        self._computer_moves.append(computer_move)
        return rnd

    def resign(self):
        """The human declines to play on."""
        self.resigned = True

    def is_complete(self) -> bool:
        return self.board.is_complete(self.max_score)

    def winner(self) -> MatchOutcome:
        return self.board.winner(self.max_score)

    def weights(self) -> Optional[dict[Move, float]]:
        """Weights behind the computer's latest move, or None if the opponent
        does not learn or has not moved yet."""
        if isinstance(self.opponent, Homunculus):
            return self.opponent.last_weights
        return None

    def to_dict(self) -> dict:
        return {
            "rules": self.rules.name,
            "moves": self.rules.values,
            "max_score": self.max_score,
            "opponent": self.opponent.name,
            "human_score": self.board.human_score,
            "computer_score": self.board.computer_score,
            "ties": self.board.ties,
            "complete": self.is_complete(),
            "over": self.is_over,
            "outcome": self.winner().value if self.is_over else None,
            "rounds": [r.to_dict() for r in self.board.history],
        }


# ---------------------------------------------------------------------------
# Console loop
# ---------------------------------------------------------------------------

def play_console(
    match: Match,
    input_fn: Callable[[], str] = input,
    output_fn: Callable[[str], None] = print,
    ask_again: bool = True,
    show_weights: bool = False,
) -> MatchOutcome:
    """Run ``match`` interactively until someone reaches the max score or the
    human stops."""
    human = Player("Human", Human(match.rules, input_fn=input_fn, output_fn=output_fn))

    output_fn(f"Welcome to {match.rules.name.upper()}! First to {match.max_score} wins.")
    while True:
        human_move = human.choose(match.round_num, match.human_moves, match.computer_moves)
        computer_move = match.choose_computer_move()
        if show_weights and match.weights() is not None:
            print_weights(match.weights(), output_fn=output_fn)

        rnd = match.play_round(human_move, computer_move)
        print_round(rnd, output_fn=output_fn)
        print_scores(match.board, output_fn=output_fn)

        if match.is_complete():
            break
        if not ask_again or not _play_again(input_fn, output_fn):
            match.resign()
            break

    print_history(match.history, output_fn=output_fn)
    outcome = match.winner()
    output_fn(MATCH_MESSAGES[outcome])
    output_fn(f"Goodbye from {match.rules.name.upper()}!")
    return outcome


def _play_again(input_fn, output_fn) -> bool:
    output_fn("Would you like to play again? (y/n)")
    answer = input_fn().strip().lower()
    return answer[:1] == "y"


# ---------------------------------------------------------------------------
# Headless matches
# ---------------------------------------------------------------------------

@dataclass
class MatchReport:
    """Result of a headless match: a scripted bot in the human seat versus
    the computer opponent."""
    algo_name: str
    opponent_name: str
    rules: str
    max_score: int
    outcome: MatchOutcome
    human_score: int
    computer_score: int
    ties: int
    ledger_size: Optional[int] = None
    final_weights: Optional[dict] = None
    history: list = field(default_factory=list)

    @property
    def rounds(self) -> int:
        return self.human_score + self.computer_score + self.ties

    def to_dict(self) -> dict:
        return {
            "algo": self.algo_name,
            "opponent": self.opponent_name,
            "rules": self.rules,
            "max_score": self.max_score,
            "outcome": self.outcome.value,
            "human_score": self.human_score,
            "computer_score": self.computer_score,
            "ties": self.ties,
            "rounds": self.rounds,
            "ledger_size": self.ledger_size,
            "final_weights": self.final_weights,
            "history": [r.to_dict() for r in self.history],
        }


def run_match(
    algo: Algorithm,
    rules: Ruleset = CLASSIC,
    max_score: int = DEFAULT_MAX_SCORE,
    seed: Optional[int] = None,
    max_rounds: int = 1000,
    opponent: Optional[Algorithm] = None,
    record_moves: bool = True,
) -> MatchReport:
    """Play ``algo`` against the computer opponent until the max score.

    A match still undecided after ``max_rounds`` rounds ends as a forfeit.
    """
    master_rng = random.Random(seed)
    match_seed = master_rng.randint(0, 2**31)
    algo.rng = random.Random(master_rng.randint(0, 2**31))
    algo.reset()

    match = Match(rules=rules, max_score=max_score, opponent=opponent, seed=match_seed)
    human = Player(algo.name, algo)

    while not match.is_complete():
        if match.round_num >= max_rounds:
            match.resign()
            break
        human_move = human.choose(match.round_num, match.human_moves, match.computer_moves)
        computer_move = match.choose_computer_move()
        rnd = match.play_round(human_move, computer_move)
        algo.observe(rnd)

    opp = match.opponent
    final_weights = None
    ledger_size = None
    if isinstance(opp, Homunculus):
        ledger_size = len(opp.ledger)
        if opp.last_weights is not None:
            final_weights = {m.value: round(w, 4) for m, w in opp.last_weights.items()}

    return MatchReport(
        algo_name=algo.name,
        opponent_name=opp.name,
        rules=rules.name,
        max_score=max_score,
        outcome=match.winner(),
        human_score=match.board.human_score,
        computer_score=match.board.computer_score,
        ties=match.board.ties,
        ledger_size=ledger_size,
        final_weights=final_weights,
        history=list(match.history) if record_moves else [],
    )
