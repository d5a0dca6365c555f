"""Stats aggregation and pretty-printing for matches."""

from dataclasses import dataclass
from collections import Counter, defaultdict
from typing import Callable

from .engine import MatchOutcome, Move, Round, Scoreboard, Winner

Output = Callable[[str], None]

ROUND_MESSAGES = {
    Winner.HUMAN: "YOU win the round!",
    Winner.COMPUTER: "THE COMPUTER wins the round!",
    Winner.TIE: "This round is a TIE",
}

MATCH_MESSAGES = {
    MatchOutcome.HUMAN: "Congratulations, you win the match!",
    MatchOutcome.COMPUTER: "Sorry, the computer won this match.",
    MatchOutcome.FORFEIT: "Match forfeit, the computer wins.",
}


# ---------------------------------------------------------------------------
# Gauntlet aggregation
# ---------------------------------------------------------------------------

@dataclass
class GauntletEntry:
    """Aggregated results of the computer against one scripted bot.

    Wins and losses are from the computer's side of the table.
    """
    name: str
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    forfeits: int = 0
    round_wins: int = 0
    round_losses: int = 0
    round_ties: int = 0

    @property
    def rounds(self) -> int:
        return self.round_wins + self.round_losses + self.round_ties

    @property
    def win_pct(self) -> float:
        return (self.wins / self.matches_played * 100) if self.matches_played else 0.0

    @property
    def round_win_pct(self) -> float:
        return (self.round_wins / self.rounds * 100) if self.rounds else 0.0

    @property
    def avg_rounds(self) -> float:
        return (self.rounds / self.matches_played) if self.matches_played else 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "matches_played": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
            "forfeits": self.forfeits,
            "win_pct": round(self.win_pct, 2),
            "round_wins": self.round_wins,
            "round_losses": self.round_losses,
            "round_ties": self.round_ties,
            "round_win_pct": round(self.round_win_pct, 2),
            "avg_rounds": round(self.avg_rounds, 2),
        }


def compute_gauntlet_table(reports: list) -> list[GauntletEntry]:
    """Fold match reports into one entry per bot, best-handled bot first."""
    entries: dict[str, GauntletEntry] = {}
    for r in reports:
        if r.algo_name not in entries:
            entries[r.algo_name] = GauntletEntry(name=r.algo_name)
        e = entries[r.algo_name]
        e.matches_played += 1
        if r.outcome is MatchOutcome.COMPUTER:
            e.wins += 1
        elif r.outcome is MatchOutcome.HUMAN:
            e.losses += 1
        else:
            e.forfeits += 1
        e.round_wins += r.computer_score
        e.round_losses += r.human_score
        e.round_ties += r.ties

    return sorted(entries.values(), key=lambda e: (-e.win_pct, -e.round_win_pct, e.name))


def move_distribution(history: list[Round]) -> dict[str, dict[str, int]]:
    """Count how often each side played each move."""
    dist: dict[str, Counter] = defaultdict(Counter)
    for rnd in history:
        dist["human"][rnd.human_move.value] += 1
        dist["computer"][rnd.computer_move.value] += 1
    return {side: dict(c) for side, c in dist.items()}


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

def print_round(rnd: Round, output_fn: Output = print):
    output_fn(f"You chose: {rnd.human_move.value}")
    output_fn(f"The computer chose: {rnd.computer_move.value}")
    output_fn(f"\n{ROUND_MESSAGES[rnd.winner]}\n")


def print_scores(board: Scoreboard, output_fn: Output = print):
    output_fn("Current score:")
    output_fn(f"\nHuman - {board.human_score} vs. Computer - {board.computer_score}\n")


def print_weights(weights: dict[Move, float], output_fn: Output = print):
    """Show the distribution the computer sampled from."""
    cells = "  ".join(f"{m.value}={w:.3f}" for m, w in weights.items())
    output_fn(f"  Computer weights: {cells}")


def print_history(history: list[Round], output_fn: Output = print):
    """Print a round-by-round table of the match."""
    output_fn("=" * 50)
    output_fn(f"  {'#':>3s}  {'Human':<10s} {'Computer':<10s} {'Winner':<10s}")
    output_fn("-" * 50)
    for rnd in history:
        output_fn(f"  {rnd.number:>3d}  {rnd.human_move.value:<10s} "
                  f"{rnd.computer_move.value:<10s} {rnd.winner.value:<10s}")
    output_fn("=" * 50)


def print_match_report(report, output_fn: Output = print):
    """Print a summary of a single headless match."""
    output_fn("=" * 60)
    output_fn(f"  {report.algo_name}  vs  {report.opponent_name}")
    output_fn(f"  Rules: {report.rules}  |  First to {report.max_score}")
    output_fn("=" * 60)
    output_fn(f"  {'':20s} {'Bot':>10s} {'Computer':>10s}")
    output_fn(f"  {'Round wins':20s} {report.human_score:>10d} {report.computer_score:>10d}")
    output_fn(f"  {'Ties':20s} {report.ties:>10d} {report.ties:>10d}")
    output_fn(f"  {'Rounds':20s} {report.rounds:>10d}")
    if report.ledger_size is not None:
        output_fn(f"  {'Ledger size':20s} {report.ledger_size:>10d}")
    if report.final_weights:
        output_fn(f"  Final weights: {report.final_weights}")
    if report.history:
        output_fn(f"  Move distribution: {move_distribution(report.history)}")

    if report.outcome is MatchOutcome.COMPUTER:
        winner = report.opponent_name
    elif report.outcome is MatchOutcome.HUMAN:
        winner = report.algo_name
    else:
        winner = "FORFEIT (round limit)"
    output_fn(f"\n  ★ Winner: {winner}")
    output_fn("=" * 60)


def print_gauntlet(entries: list[GauntletEntry], opponent_name: str = "Homunculus", output_fn: Output = print):
    """Print a formatted table of the computer's record against each bot."""
    output_fn("")
    output_fn("=" * 90)
    output_fn(f"  {opponent_name} vs scripted bots")
    output_fn("-" * 90)
    output_fn(f"  {'#':>3s}  {'Bot':<22s} {'MP':>4s} {'W':>4s} {'L':>4s} {'F':>4s} "
              f"{'Win%':>7s} {'RndW':>6s} {'RndL':>6s} {'RndT':>6s} {'Rnd%':>7s}")
    output_fn("-" * 90)
    for i, e in enumerate(entries, 1):
        output_fn(f"  {i:>3d}  {e.name:<22s} {e.matches_played:>4d} {e.wins:>4d} "
                  f"{e.losses:>4d} {e.forfeits:>4d} {e.win_pct:>6.1f}% "
                  f"{e.round_wins:>6d} {e.round_losses:>6d} {e.round_ties:>6d} "
                  f"{e.round_win_pct:>6.1f}%")
    output_fn("=" * 90)
    output_fn("  W/L/F = matches won / lost / forfeited (round limit) by the computer")
    output_fn("  RndW/RndL/RndT = total round wins / losses / ties")
    output_fn("")
