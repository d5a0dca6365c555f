import pytest

from rps_homunculus.algorithms import AlwaysRock, Cycle, Homunculus
from rps_homunculus.engine import CLASSIC, LIZARD_SPOCK, MatchOutcome
from rps_homunculus.stats import compute_gauntlet_table, print_gauntlet
from rps_homunculus.tournament import gauntlet


def test_sequential_gauntlet_runs_every_bot():
    progress = []
    reports = gauntlet(
        pool=[AlwaysRock(CLASSIC), Cycle(CLASSIC)],
        matches=3,
        seed=1,
        parallel=False,
        on_match_done=lambda done, total, r: progress.append((done, total)),
    )
    assert [r.algo_name for r in reports] == ["Always Rock"] * 3 + ["Cycle"] * 3
    assert progress[-1] == (6, 6)
    assert all(r.history == [] for r in reports)


def test_gauntlet_is_reproducible_with_a_seed():
    kwargs = dict(pool=[Cycle(LIZARD_SPOCK)], matches=2, rules=LIZARD_SPOCK, seed=5, parallel=False)
    first = [r.to_dict() for r in gauntlet(**kwargs)]
    second = [r.to_dict() for r in gauntlet(**kwargs)]
    assert first == second


def test_gauntlet_rejects_zero_matches():
    with pytest.raises(ValueError):
        gauntlet(matches=0, parallel=False)


def test_gauntlet_table_aggregates_reports():
    reports = gauntlet(pool=[AlwaysRock(CLASSIC)], matches=4, seed=2, parallel=False)
    (entry,) = compute_gauntlet_table(reports)
    assert entry.name == "Always Rock"
    assert entry.matches_played == 4
    assert entry.wins + entry.losses + entry.forfeits == 4
    assert entry.rounds == sum(r.rounds for r in reports)
    assert entry.round_wins == sum(r.computer_score for r in reports)
    assert sum(1 for r in reports if r.outcome is MatchOutcome.COMPUTER) == entry.wins


def test_print_gauntlet(capsys):
    reports = gauntlet(pool=[Cycle(CLASSIC)], matches=1, seed=3, parallel=False)
    print_gauntlet(compute_gauntlet_table(reports))
    out = capsys.readouterr().out
    assert "Homunculus vs scripted bots" in out
    assert "Cycle" in out


def test_gauntlet_only_accepts_registry_bots():
    class Mirror(AlwaysRock):
        name = "Mirror"

    with pytest.raises(ValueError, match="Homunculus, Mirror"):
        gauntlet(pool=[Cycle(CLASSIC), Homunculus(CLASSIC), Mirror(CLASSIC)], matches=1, parallel=False)
