import random

import pytest

from rps_homunculus.algorithms import Homunculus
from rps_homunculus.engine import CLASSIC, LIZARD_SPOCK, Move, Round, Winner
from rps_homunculus.homunculus import Ledger, calculate_weights, update_ledger, weighted_choice


class FixedRandom(random.Random):
    """Random source whose ``random()`` returns a fixed value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def test_ledger_is_seeded_with_two_of_each_move():
    ledger = Ledger(CLASSIC)
    assert ledger.entries == (
        Move.ROCK, Move.ROCK, Move.PAPER, Move.PAPER, Move.SCISSORS, Move.SCISSORS,
    )
    assert len(Ledger(LIZARD_SPOCK)) == 10
    assert set(Ledger(LIZARD_SPOCK).counts().values()) == {2}


def test_ledger_rejects_moves_outside_the_ruleset():
    with pytest.raises(ValueError):
        Ledger(CLASSIC).append(Move.SPOCK)


def test_uniform_ledger_gives_equal_weights():
    weights = calculate_weights(Ledger(CLASSIC), CLASSIC, random.Random(0))
    assert list(weights) == [Move.ROCK, Move.PAPER, Move.SCISSORS]
    for w in weights.values():
        assert w == pytest.approx(1 / 3, abs=1e-12)
    assert sum(weights.values()) == pytest.approx(1.0, abs=1e-12)


def test_weights_follow_ledger_frequencies():
    ledger = Ledger(CLASSIC)
    for _ in range(4):
        ledger.append(Move.PAPER)
    weights = calculate_weights(ledger, CLASSIC, random.Random(0))
    assert weights[Move.PAPER] == pytest.approx(0.6)
    assert weights[Move.ROCK] == pytest.approx(0.2)
    assert weights[Move.SCISSORS] == pytest.approx(0.2)


class PickedChoice(random.Random):
    """Random source whose ``choice()`` always returns ``move``."""

    def __init__(self, move):
        super().__init__(0)
        self.move = move

    def choice(self, seq):
        assert self.move in seq
        return self.move


def test_rounding_residual_goes_to_the_randomly_chosen_move():
    source = random.Random(99)
    residuals = 0
    for n in range(300):
        ledger = Ledger(LIZARD_SPOCK)
        for _ in range(source.randrange(1, 40)):
            ledger.append(source.choice(LIZARD_SPOCK.moves))
        picked = LIZARD_SPOCK.moves[n % len(LIZARD_SPOCK.moves)]

        weights = calculate_weights(ledger, LIZARD_SPOCK, PickedChoice(picked))

        counts = ledger.counts()
        plain = {m: counts[m] / len(ledger) for m in LIZARD_SPOCK.moves}
        residual = 1.0 - sum(plain.values())
        for move in LIZARD_SPOCK.moves:
            if move is picked:
                assert weights[move] == plain[move] + residual
            else:
                assert weights[move] == plain[move]
        assert sum(weights.values()) == pytest.approx(1.0, abs=1e-12)
        residuals += residual != 0.0
    assert residuals > 0


@pytest.mark.parametrize("rules", [CLASSIC, LIZARD_SPOCK])
def test_weights_always_sum_to_one(rules):
    rng = random.Random(1234)
    ledger = Ledger(rules)
    for _ in range(200):
        ledger.append(rng.choice(rules.moves))
        weights = calculate_weights(ledger, rules, rng)
        assert abs(sum(weights.values()) - 1.0) < 1e-9
        assert all(0.0 <= w <= 1.0 for w in weights.values())


def test_human_win_appends_the_counter_classic():
    ledger = Ledger(CLASSIC)
    rnd = Round(number=1, human_move=Move.ROCK, computer_move=Move.SCISSORS, winner=Winner.HUMAN)
    added = update_ledger(ledger, rnd, CLASSIC, random.Random(0))
    assert added is Move.PAPER
    assert ledger.entries[-1] is Move.PAPER
    assert len(ledger) == 7


def test_human_win_appends_one_of_two_counters_lizard_spock():
    rnd = Round(number=1, human_move=Move.ROCK, computer_move=Move.SCISSORS, winner=Winner.HUMAN)
    seen = set()
    for seed in range(30):
        ledger = Ledger(LIZARD_SPOCK)
        seen.add(update_ledger(ledger, rnd, LIZARD_SPOCK, random.Random(seed)))
        assert len(ledger) == 11
    assert seen == {Move.PAPER, Move.SPOCK}


def test_tie_is_learned_like_a_human_win():
    ledger = Ledger(CLASSIC)
    rnd = Round(number=1, human_move=Move.SCISSORS, computer_move=Move.SCISSORS, winner=Winner.TIE)
    assert update_ledger(ledger, rnd, CLASSIC, random.Random(0)) is Move.ROCK


def test_computer_win_reinforces_its_move():
    ledger = Ledger(LIZARD_SPOCK)
    rnd = Round(number=1, human_move=Move.PAPER, computer_move=Move.LIZARD, winner=Winner.COMPUTER)
    assert update_ledger(ledger, rnd, LIZARD_SPOCK, random.Random(0)) is Move.LIZARD
    assert ledger.counts()[Move.LIZARD] == 3


def test_sampler_walks_moves_in_order():
    weights = {Move.ROCK: 0.5, Move.PAPER: 0.25, Move.SCISSORS: 0.25}
    assert weighted_choice(weights, CLASSIC, FixedRandom(0.1)) is Move.ROCK
    assert weighted_choice(weights, CLASSIC, FixedRandom(0.5)) is Move.ROCK
    assert weighted_choice(weights, CLASSIC, FixedRandom(0.6)) is Move.PAPER
    assert weighted_choice(weights, CLASSIC, FixedRandom(0.9)) is Move.SCISSORS


def test_sampler_handles_degenerate_distribution():
    weights = {Move.ROCK: 0.0, Move.PAPER: 1.0, Move.SCISSORS: 0.0}
    for r in (0.01, 0.5, 0.999999):
        assert weighted_choice(weights, CLASSIC, FixedRandom(r)) is Move.PAPER


def test_sampler_falls_back_to_last_move():
    weights = {m: 0.19 for m in LIZARD_SPOCK.moves}
    assert weighted_choice(weights, LIZARD_SPOCK, FixedRandom(0.99)) is Move.SPOCK


@pytest.mark.parametrize("rules", [CLASSIC, LIZARD_SPOCK])
def test_sampler_returns_a_domain_move(rules):
    rng = random.Random(7)
    ledger = Ledger(rules)
    for _ in range(100):
        move = weighted_choice(calculate_weights(ledger, rules, rng), rules, rng)
        assert move in rules.moves
        ledger.append(move)


def test_same_seed_same_choices():
    def play(seed):
        algo = Homunculus(CLASSIC, random.Random(seed))
        moves = []
        for i in range(25):
            move = algo.choose(i, [], [])
            moves.append(move)
            algo.observe(Round(number=i + 1, human_move=Move.ROCK, computer_move=move, winner=Winner.TIE))
        return moves, algo.ledger.entries

    assert play(99) == play(99)


def test_homunculus_ledger_grows_one_per_round():
    algo = Homunculus(LIZARD_SPOCK, random.Random(5))
    for i in range(12):
        move = algo.choose(i, [], [])
        algo.observe(Round(number=i + 1, human_move=Move.SPOCK, computer_move=move, winner=Winner.HUMAN))
        assert len(algo.ledger) == 10 + i + 1
    assert sum(algo.last_weights.values()) == pytest.approx(1.0, abs=1e-9)
