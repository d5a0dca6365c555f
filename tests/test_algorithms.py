import random

import pytest

from rps_homunculus.algorithms import (
    ALL_ALGORITHM_CLASSES,
    AntiTitForTat,
    Cycle,
    FrequencyAnalyzer,
    Homunculus,
    Human,
    Player,
    RandomComputer,
    TitForTat,
    WinStayLoseShift,
    get_algorithm_by_name,
    get_all_algorithms,
    get_opponent,
)
from rps_homunculus.engine import CLASSIC, LIZARD_SPOCK, Move


def scripted_input(lines):
    it = iter(lines)
    return lambda: next(it)


def test_human_reprompts_until_valid():
    output = []
    human = Human(CLASSIC, input_fn=scripted_input(["banana", "  ", "Paper"]), output_fn=output.append)
    assert human.choose(0, [], []) is Move.PAPER
    assert output.count("Sorry, invalid choice.") == 2
    assert output[0] == "Please choose rock, paper, or scissors:"


def test_human_only_accepts_moves_of_the_ruleset():
    output = []
    human = Human(CLASSIC, input_fn=scripted_input(["spock", "rock"]), output_fn=output.append)
    assert human.choose(0, [], []) is Move.ROCK
    assert "Sorry, invalid choice." in output

    human = Human(LIZARD_SPOCK, input_fn=scripted_input(["spock"]), output_fn=output.append)
    assert human.choose(0, [], []) is Move.SPOCK


def test_player_keeps_the_last_move():
    player = Player("Bot", Cycle(CLASSIC))
    assert player.move is None
    assert player.choose(1, [], []) is Move.PAPER
    assert player.move is Move.PAPER


def test_registry_lookup_is_case_insensitive():
    algo = get_algorithm_by_name("frequency analyzer", LIZARD_SPOCK)
    assert isinstance(algo, FrequencyAnalyzer)
    assert algo.rules is LIZARD_SPOCK
    with pytest.raises(ValueError):
        get_algorithm_by_name("Nobody")


def test_all_algorithms_are_fresh_instances():
    algos = get_all_algorithms()
    assert [type(a) for a in algos] == ALL_ALGORITHM_CLASSES
    assert len({a.name for a in algos}) == len(algos)


def test_get_opponent():
    assert isinstance(get_opponent("homunculus"), Homunculus)
    assert isinstance(get_opponent("Random", LIZARD_SPOCK), RandomComputer)
    with pytest.raises(ValueError):
        get_opponent("oracle")
    with pytest.raises(TypeError):
        get_opponent("random", CLASSIC, random.Random(1))


@pytest.mark.parametrize("rules", [CLASSIC, LIZARD_SPOCK])
def test_scripted_bots_stay_in_the_domain(rules):
    rng = random.Random(3)
    for algo in get_all_algorithms(rules):
        algo.rng = random.Random(11)
        mine, theirs = [], []
        for i in range(20):
            move = algo.choose(i, mine, theirs)
            assert move in rules.moves
            mine.append(move)
            theirs.append(rng.choice(rules.moves))


def test_cycle_uses_canonical_order():
    algo = Cycle(LIZARD_SPOCK)
    assert [algo.choose(i, [], []) for i in range(6)] == [
        Move.ROCK, Move.PAPER, Move.SCISSORS, Move.LIZARD, Move.SPOCK, Move.ROCK,
    ]


def test_reactive_bots():
    assert TitForTat().choose(1, [Move.ROCK], [Move.SCISSORS]) is Move.SCISSORS
    assert AntiTitForTat().choose(1, [Move.ROCK], [Move.SCISSORS]) is Move.ROCK
    wsls = WinStayLoseShift()
    assert wsls.choose(1, [Move.ROCK], [Move.SCISSORS]) is Move.ROCK
    assert wsls.choose(1, [Move.ROCK], [Move.PAPER]) is Move.SCISSORS


def test_homunculus_reset_restores_the_seed_ledger():
    algo = Homunculus(CLASSIC)
    algo.ledger.append(Move.ROCK)
    algo.reset()
    assert len(algo.ledger) == 6
    assert algo.last_weights is None
