"""CLI for pwmatch: list pattern matches in a password, or score its best decomposition."""

import argparse
import logging
import sys

from rich import print
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import load_config, ranked_dicts_from_config
from .matching import omnimatch
from .scoring import most_guessable_match_sequence


def _details(d: dict) -> str:
    pattern = d["pattern"]
    if pattern == "dictionary":
        out = f"{d['dictionary_name']} #{d['rank']} '{d['matched_word']}'"
        if d["reversed"]:
            out += " reversed"
        if d["l33t"]:
            out += f" l33t ({d['sub_display']})"
        return out
    if pattern == "spatial":
        return f"{d['graph']}, {d['turns']} turn(s), {d['shifted_count']} shifted"
    if pattern == "repeat":
        return f"'{d['base_token']}' x{d['repeat_count']}"
    if pattern == "sequence":
        direction = "ascending" if d["ascending"] else "descending"
        return f"{d['sequence_name']} {direction}"
    if pattern == "regex":
        return d["regex_name"]
    if pattern == "date":
        sep = f" sep '{d['separator']}'" if d["separator"] else ""
        return f"{d['year']:04d}-{d['month']:02d}-{d['day']:02d}{sep}"
    return ""


def _match_table(matches, title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("i", justify="right")
    table.add_column("j", justify="right")
    table.add_column("Token")
    table.add_column("Pattern")
    table.add_column("Details")
    table.add_column("Guesses", justify="right")
    for m in matches:
        d = m.as_dict()
        guesses = f"{d['guesses']:.3g}" if "guesses" in d else ""
        table.add_row(str(m.i), str(m.j), escape(m.token), m.pattern, escape(_details(d)), guesses)
    return table


def _inputs(args, cfg):
    return list(cfg.get("user_inputs") or []) + list(args.user_input or [])


def cmd_match(args):
    cfg = load_config()
    matches = omnimatch(args.password, _inputs(args, cfg), ranked_dicts_from_config(cfg))
    if not matches:
        print("[yellow]No patterns found.[/yellow]")
        return
    print(_match_table(matches, f"{len(matches)} match(es)"))


def cmd_score(args):
    cfg = load_config()
    matches = omnimatch(args.password, _inputs(args, cfg), ranked_dicts_from_config(cfg))
    result = most_guessable_match_sequence(args.password, matches)
    header = f"Guesses: {float(result.guesses):.3g}"
    body = (
        f"log10 guesses: {result.guesses_log10:.2f}\n"
        f"Candidate matches: {len(matches)}\n"
        f"Sequence length: {len(result.sequence)}"
    )
    print(Panel(body, title=header))
    if result.sequence:
        print(_match_table(result.sequence, "Most guessable sequence"))


def main(argv=None):
    parser = argparse.ArgumentParser(prog="pwmatch")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log matcher activity")
    sub = parser.add_subparsers(dest="cmd", required=True)

    m = sub.add_parser("match", help="List every pattern match in a password")
    m.add_argument("password", type=str, help="Password to analyse (wrap in quotes)")
    m.add_argument("--user-input", "-u", action="append", help="Extra word to match (repeatable)")
    m.set_defaults(func=cmd_match)

    sc = sub.add_parser("score", help="Show the minimum-guess decomposition of a password")
    sc.add_argument("password", type=str, help="Password to analyse (wrap in quotes)")
    sc.add_argument("--user-input", "-u", action="append", help="Extra word to match (repeatable)")
    sc.set_defaults(func=cmd_score)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        args.func(args)
    except (TypeError, ValueError) as e:
        print(f"[red]Failed: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
