"""
pwmatch.scoring

Guess estimation for matches, and the search for the decomposition of a
password into non-overlapping matches that needs the fewest guesses.

- estimate_guesses(match, password): guesses needed for a single match
- most_guessable_match_sequence(password, matches, exclude_additive):
  minimum-guess sequence covering the whole password (gaps are bruteforced)
"""

import math
import re
import sys
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Sequence

from .adjacency_graphs import calc_average_degree, graphs
from .patterns import (
    BruteforceMatch,
    DateMatch,
    DictionaryMatch,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)

BRUTEFORCE_CARDINALITY = 10
MIN_GUESSES_BEFORE_GROWING_SEQUENCE = 10000
MIN_SUBMATCH_GUESSES_SINGLE_CHAR = 10
MIN_SUBMATCH_GUESSES_MULTI_CHAR = 50
MIN_YEAR_SPACE = 20
REFERENCE_YEAR = 2000

START_UPPER = re.compile(r"^[A-Z][^A-Z]+$")
END_UPPER = re.compile(r"^[^A-Z]+[A-Z]$")
ALL_UPPER = re.compile(r"^[^a-z]+$")
ALL_LOWER = re.compile(r"^[^A-Z]+$")


@dataclass
class ScoringResult:
    password: str
    guesses: Decimal
    guesses_log10: float
    sequence: List[Match]


def nCk(n: int, k: int) -> int:
    if k > n:
        return 0
    return math.comb(n, k)


@lru_cache(maxsize=None)
def _keyboard_stats(name: str):
    graph = graphs()[name]
    return len(graph), calc_average_degree(graph)


def most_guessable_match_sequence(password: str, matches: Sequence[Match],
                                  exclude_additive: bool = False) -> ScoringResult:
    """
    Find the sequence of non-overlapping matches covering `password` with
    the fewest total guesses.

    The guess count of a length-l sequence is l! * (product of match
    guesses) + MIN_GUESSES_BEFORE_GROWING_SEQUENCE ** (l - 1); the factorial
    accounts for ordering and the additive term penalises long sequences.
    Repeat matches score their base token with exclude_additive=False as well.
    """
    n = len(password)
    if n == 0:
        return ScoringResult(password, Decimal(1), 0.0, [])

    matches_by_j: List[List[Match]] = [[] for _ in range(n)]
    for m in matches:
        matches_by_j[m.j].append(m)
    for lst in matches_by_j:
        lst.sort(key=lambda m: m.i)

    # optimal_*[k][l]: best match / guess product / total guesses for a
    # length-l sequence ending at index k
    optimal_m: List[Dict[int, Match]] = [{} for _ in range(n)]
    optimal_pi: List[Dict[int, Decimal]] = [{} for _ in range(n)]
    optimal_g: List[Dict[int, Decimal]] = [{} for _ in range(n)]

    def update(m: Match, length: int) -> None:
        k = m.j
        pi = estimate_guesses(m, password)
        if length > 1:
            pi *= optimal_pi[m.i - 1][length - 1]
        g = math.factorial(length) * pi
        if not exclude_additive:
            g += Decimal(MIN_GUESSES_BEFORE_GROWING_SEQUENCE) ** (length - 1)
        # a shorter or equal sequence with fewer guesses already wins
        for competing_l, competing_g in optimal_g[k].items():
            if competing_l > length:
                continue
            if competing_g <= g:
                return
        optimal_g[k][length] = g
        optimal_m[k][length] = m
        optimal_pi[k][length] = pi

    def make_bruteforce_match(i: int, j: int) -> Match:
        return Match(i, j, password[i:j + 1], BruteforceMatch())

    def bruteforce_update(k: int) -> None:
        update(make_bruteforce_match(0, k), 1)
        for i in range(1, k + 1):
            m = make_bruteforce_match(i, k)
            for length, last_m in list(optimal_m[i - 1].items()):
                # two bruteforce matches in a row are never optimal
                if isinstance(last_m.data, BruteforceMatch):
                    continue
                update(m, length + 1)

    for k in range(n):
        for m in matches_by_j[k]:
            if m.i > 0:
                for length in list(optimal_m[m.i - 1]):
                    update(m, length + 1)
            else:
                update(m, 1)
        bruteforce_update(k)

    # unwind from the end
    k = n - 1
    best_l = min(optimal_g[k], key=lambda length: optimal_g[k][length])
    guesses = optimal_g[k][best_l]
    sequence: List[Match] = []
    length = best_l
    while k >= 0:
        m = optimal_m[k][length]
        sequence.insert(0, m)
        k = m.i - 1
        length -= 1

    return ScoringResult(password, guesses, float(guesses.log10()), sequence)


def estimate_guesses(match: Match, password: str) -> Decimal:
    if match.guesses is not None:
        return match.guesses
    min_guesses = 1
    if len(match.token) < len(password):
        if len(match.token) == 1:
            min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR
        else:
            min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR

    d = match.data
    if isinstance(d, BruteforceMatch):
        guesses = bruteforce_guesses(match)
    elif isinstance(d, DictionaryMatch):
        guesses = dictionary_guesses(match)
    elif isinstance(d, SpatialMatch):
        guesses = spatial_guesses(match)
    elif isinstance(d, RepeatMatch):
        guesses = repeat_guesses(match)
    elif isinstance(d, SequenceMatch):
        guesses = sequence_guesses(match)
    elif isinstance(d, RegexMatch):
        guesses = regex_guesses(match)
    elif isinstance(d, DateMatch):
        guesses = date_guesses(match)
    else:
        raise TypeError("unknown pattern payload: %r" % (d,))

    match.guesses = max(Decimal(guesses), Decimal(min_guesses))
    return match.guesses


def bruteforce_guesses(match: Match):
    length = len(match.token)
    try:
        guesses = float(BRUTEFORCE_CARDINALITY) ** length
    except OverflowError:
        guesses = sys.float_info.max
    # bruteforce must never beat a real match of the same span
    if length == 1:
        min_guesses = MIN_SUBMATCH_GUESSES_SINGLE_CHAR + 1
    else:
        min_guesses = MIN_SUBMATCH_GUESSES_MULTI_CHAR + 1
    return max(guesses, min_guesses)


def dictionary_guesses(match: Match):
    d = match.data
    reversed_variations = 2 if d.reversed else 1
    return d.rank * uppercase_variations(match) * l33t_variations(match) * reversed_variations


def repeat_guesses(match: Match):
    d = match.data
    return d.base_guesses * Decimal(d.repeat_count)


def sequence_guesses(match: Match):
    first_chr = match.token[:1]
    # obvious starting points
    if first_chr in ("a", "A", "z", "Z", "0", "1", "9"):
        base_guesses = 4
    elif first_chr.isdigit():
        base_guesses = 10
    else:
        base_guesses = 26
    if not match.data.ascending:
        base_guesses *= 2
    return base_guesses * len(match.token)


def regex_guesses(match: Match):
    d = match.data
    if d.regex_name == "recent_year":
        year_space = abs(int(d.regex_match[0]) - REFERENCE_YEAR)
        return max(year_space, MIN_YEAR_SPACE)
    raise ValueError("no guess estimate for regex %r" % d.regex_name)


def date_guesses(match: Match):
    d = match.data
    year_space = max(abs(d.year - REFERENCE_YEAR), MIN_YEAR_SPACE)
    guesses = year_space * 365
    if d.separator:
        guesses *= 4
    return guesses


def spatial_guesses(match: Match):
    d = match.data
    if d.graph in ("qwerty", "dvorak"):
        s, avg_degree = _keyboard_stats("qwerty")
    else:
        s, avg_degree = _keyboard_stats("keypad")
    guesses = 0.0
    length = len(match.token)
    t = d.turns
    # paths of every length up to the token's with at most t turns
    for i in range(2, length + 1):
        possible_turns = min(t, i - 1) + 1
        for j in range(1, possible_turns):
            guesses += nCk(i - 1, j - 1) * s * pow(avg_degree, j)
    if d.shifted_count:
        shifted = d.shifted_count
        unshifted = length - shifted
        if unshifted == 0:
            guesses *= 2
        else:
            guesses *= sum(nCk(shifted + unshifted, i)
                           for i in range(1, min(shifted, unshifted) + 1))
    return guesses


def uppercase_variations(match: Match) -> int:
    word = match.token
    if ALL_LOWER.match(word) or word.lower() == word:
        return 1
    # capitalised, last letter upper, or all caps
    for regex in (START_UPPER, END_UPPER, ALL_UPPER):
        if regex.match(word):
            return 2
    upper = sum(1 for c in word if c.isupper())
    lower = sum(1 for c in word if c.islower())
    return sum(nCk(upper + lower, i) for i in range(1, min(upper, lower) + 1))


def l33t_variations(match: Match) -> int:
    d = match.data
    if not d.l33t:
        return 1
    variations = 1
    chrs = match.token.lower()
    for subbed, unsubbed in d.sub.items():
        s = chrs.count(subbed)
        u = chrs.count(unsubbed)
        if s == 0 or u == 0:
            # fully substituted or fully plain: one extra bit
            variations *= 2
        else:
            variations *= sum(nCk(u + s, i) for i in range(1, min(u, s) + 1))
    return variations
