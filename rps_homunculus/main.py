"""CLI entry point for the adaptive Rock-Paper-Scissors game."""

import argparse

from .algorithms import ALL_ALGORITHM_CLASSES, OPPONENT_CLASSES, get_algorithm_by_name, get_opponent
from .engine import RULESETS, get_ruleset
from .export import export_csv, export_gauntlet_csv, export_gauntlet_json, export_json
from .game import DEFAULT_MAX_SCORE, Match, play_console, run_match
from .stats import compute_gauntlet_table, print_gauntlet, print_match_report
from .tournament import gauntlet


def list_algorithms():
    """Print all scripted bot names."""
    print("\nAvailable Bots:")
    print("-" * 40)
    for i, cls in enumerate(ALL_ALGORITHM_CLASSES, 1):
        print(f"  {i:>2d}. {cls.name}")
    print()


def cmd_play(args):
    """Play an interactive match against the computer."""
    rules = get_ruleset(args.rules)
    opponent = get_opponent(args.opponent, rules)
    match = Match(rules=rules, max_score=args.max_score, opponent=opponent, seed=args.seed)

    try:
        play_console(match, show_weights=args.show_weights)
    except (EOFError, KeyboardInterrupt):
        match.resign()
        print("\n  Input closed, match abandoned.")

    if args.export and args.output:
        if args.export == "json":
            export_json(match, args.output)
        else:
            export_csv(match.history, args.output)


def cmd_simulate(args):
    """Run headless matches of a scripted bot against the computer."""
    rules = get_ruleset(args.rules)
    print(f"\n🤖 Simulate: {args.algo} vs {args.opponent}  |  {args.matches} match(es)  |  "
          f"first to {args.max_score}"
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))

    reports = []
    for k in range(args.matches):
        algo = get_algorithm_by_name(args.algo, rules)
        opponent = get_opponent(args.opponent, rules)
        match_seed = (args.seed * 1000 + k) if args.seed is not None else None
        report = run_match(algo, rules=rules, max_score=args.max_score, seed=match_seed, opponent=opponent)
        print_match_report(report)
        reports.append(report)

    if len(reports) > 1:
        print_gauntlet(compute_gauntlet_table(reports), opponent_name=reports[0].opponent_name)

    if args.export and args.output:
        _export_reports(args, reports)


def cmd_gauntlet(args):
    """Run the computer against every scripted bot."""
    rules = get_ruleset(args.rules)
    total = len(ALL_ALGORITHM_CLASSES) * args.matches
    print(f"\n🏆 Gauntlet: {args.opponent} vs {len(ALL_ALGORITHM_CLASSES)} bots  |  "
          f"{total} matches  |  first to {args.max_score}"
          + (f"  |  seed={args.seed}" if args.seed is not None else ""))
    print("  Running...", end="", flush=True)

    reports = gauntlet(
        matches=args.matches,
        rules=rules,
        max_score=args.max_score,
        seed=args.seed,
        opponent_name=args.opponent,
        parallel=not args.no_parallel,
    )
    print(f" done! ({len(reports)} matches played)")

    print_gauntlet(compute_gauntlet_table(reports), opponent_name=OPPONENT_CLASSES[args.opponent].name)

    if args.export and args.output:
        _export_reports(args, reports)


def _export_reports(args, reports):
    """Handle export based on CLI args."""
    if args.export == "json":
        export_gauntlet_json(reports, args.output)
    else:
        export_gauntlet_csv(reports, args.output)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _add_common(sub):
    sub.add_argument("--rules", choices=sorted(RULESETS), default="classic",
                     help="Move set: classic (RPS) or rpsls (adds lizard and spock)")
    sub.add_argument("--max-score", type=_positive_int, default=DEFAULT_MAX_SCORE,
                     help=f"Round wins needed to take the match (default: {DEFAULT_MAX_SCORE})")
    sub.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    sub.add_argument("--opponent", choices=sorted(OPPONENT_CLASSES), default="homunculus",
                     help="Computer opponent (default: homunculus)")
    sub.add_argument("--export", choices=["json", "csv"], help="Export format")
    sub.add_argument("--output", help="Export file path")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="rps-homunculus",
        description="🎮 Rock-Paper-Scissors against an opponent that learns",
    )
    parser.add_argument("--list", action="store_true", help="List all scripted bots")

    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play a match at the console")
    _add_common(play)
    play.add_argument("--show-weights", action="store_true",
                      help="Print the computer's move weights every round")

    sim = subparsers.add_parser("simulate", help="Scripted bot vs the computer, headless")
    _add_common(sim)
    sim.add_argument("--algo", required=True, help="Name of the scripted bot")
    sim.add_argument("--matches", type=_positive_int, default=1, help="Number of matches (default: 1)")

    gnt = subparsers.add_parser("gauntlet", help="The computer vs every scripted bot")
    _add_common(gnt)
    gnt.add_argument("--matches", type=_positive_int, default=20,
                     help="Matches per bot (default: 20)")
    gnt.add_argument("--no-parallel", action="store_true", help="Run matches in this process")

    args = parser.parse_args(argv)

    if args.list:
        list_algorithms()
        return

    if args.command is None:
        parser.print_help()
        return

    # Name lookups are usage errors; anything raised while running is not.
    try:
        rules = get_ruleset(args.rules)
        if args.command == "simulate":
            args.algo = get_algorithm_by_name(args.algo, rules).name
    except ValueError as e:
        parser.error(str(e))

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    else:
        cmd_gauntlet(args)


if __name__ == "__main__":
    main()
