"""
pwmatch.matching

Pattern matchers. Each matcher takes a password and returns a list of
Match objects for the spans it recognises:

- dictionary_match: substrings found in ranked word lists
- reverse_dictionary_match: the same, on the reversed password
- l33t_match: dictionary words hidden behind substitutions (p4ssw0rd)
- spatial_match: keyboard walks (qwerty, dvorak, keypads)
- repeat_match: repeated units (aaa, abcabc)
- sequence_match: constant code point steps (abcd, 9753)
- regex_match: tagged regular expressions (recent years)
- date_match: digit runs that read as day/month/year

omnimatch(password, user_inputs) runs all of them and returns the matches
sorted by (i, j).
"""

import logging
import re
from functools import partial
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from . import adjacency_graphs, scoring
from .adjacency_graphs import Graph
from .frequency_lists import USER_INPUTS, RankedDicts, ascii_lower, build_ranked_dict, default_ranked_dicts
from .patterns import (
    DateMatch,
    DictionaryMatch,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)

_LOGGER = logging.getLogger(__name__)

L33T_TABLE: Dict[str, List[str]] = {
    "a": ["4", "@"],
    "b": ["8"],
    "c": ["(", "{", "[", "<"],
    "e": ["3"],
    "g": ["6", "9"],
    "i": ["1", "!", "|"],
    "l": ["1", "|", "7"],
    "o": ["0"],
    "s": ["$", "5"],
    "t": ["+", "7"],
    "x": ["%"],
    "z": ["2"],
}

REGEXEN: List[Tuple[str, "re.Pattern"]] = [
    ("recent_year", re.compile(r"19\d\d|200\d|201\d", re.ASCII)),
]

DATE_MAX_YEAR = 2050
DATE_MIN_YEAR = 1000
# split points for separator-less dates, by token length
DATE_SPLITS: Dict[int, List[Tuple[int, int]]] = {
    4: [          # for length-4 strings, eg 1191 or 9111, two ways to split:
        (1, 2),   # 1 1 91 (2nd split starts at index 1, 3rd at index 2)
        (2, 3),   # 91 1 1
    ],
    5: [
        (1, 3),   # 1 11 91
        (2, 3),   # 11 1 91
    ],
    6: [
        (1, 2),   # 1 1 1991
        (2, 4),   # 11 11 91
        (4, 5),   # 1991 1 1
    ],
    7: [
        (1, 3),   # 1 11 1991
        (2, 3),   # 11 1 1991
        (4, 5),   # 1991 1 11
        (4, 6),   # 1991 11 1
    ],
    8: [
        (2, 4),   # 11 11 1991
        (4, 6),   # 1991 11 11
    ],
}

MAX_DELTA = 5

SHIFTED_RX = re.compile(r'[~!@#$%^&*()_+QWERTYUIOP{}|ASDFGHJKL:"ZXCVBNM<>?]')

GREEDY_RX = re.compile(r"(.+)\1+", re.DOTALL)
LAZY_RX = re.compile(r"(.+?)\1+", re.DOTALL)
LAZY_ANCHORED_RX = re.compile(r"(.+?)\1+", re.DOTALL)  # used with fullmatch

LOWER_RX = re.compile(r"[a-z]+")
UPPER_RX = re.compile(r"[A-Z]+")
DIGITS_RX = re.compile(r"[0-9]+")

MAYBE_DATE_NO_SEPARATOR_RX = re.compile(r"[0-9]{4,8}")
MAYBE_DATE_WITH_SEPARATOR_RX = re.compile(
    r"([0-9]{1,4})([\s/\\_.-])([0-9]{1,2})\2([0-9]{1,4})", re.ASCII)


class DMY(NamedTuple):
    year: int
    month: int
    day: int


def _sorted(matches: List[Match]) -> List[Match]:
    return sorted(matches, key=lambda m: (m.i, m.j))


def translate(s: str, chr_map: Dict[str, str]) -> str:
    """Replace every character of `s` found in `chr_map`."""
    return s.translate(str.maketrans(chr_map))


def omnimatch(password: str, user_inputs: Optional[Iterable[str]] = None,
              ranked_dictionaries: Optional[RankedDicts] = None) -> List[Match]:
    """
    Run every matcher over `password`.

    `user_inputs` (e.g. the user's name or email) are ranked by order of
    appearance and matched as the 'user_inputs' dictionary. The dictionary
    set defaults to frequency_lists.default_ranked_dicts(); the caller's
    mapping is copied, never modified.
    """
    if not isinstance(password, str):
        raise TypeError("password must be a str, not %s" % type(password).__name__)
    if ranked_dictionaries is None:
        ranked = default_ranked_dicts()
    else:
        ranked = dict(ranked_dictionaries)
    ranked[USER_INPUTS] = build_ranked_dict(user_inputs or [])
    return _omnimatch(password, ranked)


def _omnimatch(password: str, ranked_dictionaries: RankedDicts) -> List[Match]:
    matchers: List[Tuple[str, Callable[[str], List[Match]]]] = [
        ("dictionary", partial(dictionary_match, ranked_dictionaries=ranked_dictionaries)),
        ("reverse_dictionary", partial(reverse_dictionary_match, ranked_dictionaries=ranked_dictionaries)),
        ("l33t", partial(l33t_match, ranked_dictionaries=ranked_dictionaries)),
        ("spatial", partial(spatial_match, graphs=adjacency_graphs.graphs())),
        ("repeat", partial(repeat_match, ranked_dictionaries=ranked_dictionaries)),
        ("sequence", sequence_match),
        ("regex", partial(regex_match, regexen=REGEXEN)),
        ("date", date_match),
    ]
    matches: List[Match] = []
    for name, matcher in matchers:
        found = matcher(password)
        _LOGGER.debug("%s matcher: %d match(es)", name, len(found))
        matches.extend(found)
    return _sorted(matches)


# ------------------------------------------------------------------------------
# dictionary match (common passwords, english, last names, etc) ----------------
# ------------------------------------------------------------------------------

def dictionary_match(password: str, ranked_dictionaries: RankedDicts) -> List[Match]:
    matches = []
    length = len(password)
    password_lower = ascii_lower(password)
    for dictionary_name, ranked_dict in ranked_dictionaries.items():
        for i in range(length):
            for j in range(i, length):
                word = password_lower[i:j + 1]
                if word in ranked_dict:
                    matches.append(Match(
                        i, j, password[i:j + 1],
                        DictionaryMatch(dictionary_name, word, ranked_dict[word]),
                    ))
    return _sorted(matches)


def reverse_dictionary_match(password: str, ranked_dictionaries: RankedDicts) -> List[Match]:
    reversed_password = password[::-1]
    matches = dictionary_match(reversed_password, ranked_dictionaries)
    last = len(password) - 1
    for match in matches:
        match.token = match.token[::-1]
        match.data.reversed = True
        # map coordinates back to the original string
        match.i, match.j = last - match.j, last - match.i
    return _sorted(matches)


# ------------------------------------------------------------------------------
# dictionary match with common l33t substitutions ------------------------------
# ------------------------------------------------------------------------------

def relevant_l33t_subtable(password: str, table: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Copy of `table` keeping only substitutes that occur in `password`."""
    subtable = {}
    for letter, subs in table.items():
        relevant_subs = [sub for sub in subs if sub in password]
        if relevant_subs:
            subtable[letter] = relevant_subs
    return subtable


def enumerate_l33t_subs(table: Dict[str, List[str]]) -> List[Dict[str, str]]:
    """
    All consistent substitute -> letter dictionaries for a subtable.

    A substitute may stand for several letters ('1' for i or l) but only one
    at a time, so each conflict forks the partial assignment.
    """
    subs: List[List[Tuple[str, str]]] = [[]]

    def dedup(candidates: List[List[Tuple[str, str]]]) -> List[List[Tuple[str, str]]]:
        deduped = []
        members = set()
        for sub in candidates:
            label = tuple(sorted(sub))
            if label not in members:
                members.add(label)
                deduped.append(sub)
        return deduped

    for letter, l33t_chrs in table.items():
        next_subs = []
        for l33t_chr in l33t_chrs:
            for sub in subs:
                dup = [idx for idx, (chr_, _) in enumerate(sub) if chr_ == l33t_chr]
                if not dup:
                    next_subs.append(sub + [(l33t_chr, letter)])
                else:
                    alternative = [pair for pair in sub if pair[0] != l33t_chr]
                    alternative.append((l33t_chr, letter))
                    next_subs.append(sub)
                    next_subs.append(alternative)
        subs = dedup(next_subs)

    return [dict(sub) for sub in subs]


def l33t_match(password: str, ranked_dictionaries: RankedDicts,
               l33t_table: Optional[Dict[str, List[str]]] = None) -> List[Match]:
    if l33t_table is None:
        l33t_table = L33T_TABLE
    matches = []
    for sub in enumerate_l33t_subs(relevant_l33t_subtable(password, l33t_table)):
        if not sub:
            # no relevant substitutions at all
            break
        subbed_password = translate(password, sub)
        for match in dictionary_match(subbed_password, ranked_dictionaries):
            token = password[match.i:match.j + 1]
            if ascii_lower(token) == match.data.matched_word:
                # only keep matches that needed a substitution
                continue
            match_sub = {subbed: letter for subbed, letter in sub.items() if subbed in token}
            match.token = token
            match.data.l33t = True
            match.data.sub = match_sub
            match.data.sub_display = ", ".join(
                "%s -> %s" % (subbed, letter) for subbed, letter in match_sub.items())
            matches.append(match)

    # single-character l33t matches are noise: '1' reads as 'i', '4' as 'a',
    # both common words with low rank.
    return _sorted([m for m in matches if len(m.token) > 1])


# ------------------------------------------------------------------------------
# spatial match (qwerty/dvorak/keypad) -----------------------------------------
# ------------------------------------------------------------------------------

def spatial_match(password: str, graphs: Dict[str, Graph]) -> List[Match]:
    matches = []
    for graph_name, graph in graphs.items():
        matches.extend(spatial_match_helper(password, graph, graph_name))
    return _sorted(matches)


def spatial_match_helper(password: str, graph: Graph, graph_name: str) -> List[Match]:
    matches = []
    i = 0
    while i < len(password) - 1:
        j = i + 1
        last_direction = None
        turns = 0
        if graph_name in ("qwerty", "dvorak") and SHIFTED_RX.search(password[i]):
            # initial character is shifted
            shifted_count = 1
        else:
            shifted_count = 0

        while True:
            prev_char = password[j - 1]
            found = False
            found_direction = -1
            cur_direction = -1
            adjacents = graph.get(prev_char) or []
            # consider growing the pattern by one character if j hasn't gone over the edge
            if j < len(password):
                cur_char = password[j]
                for adj in adjacents:
                    cur_direction += 1
                    if adj and cur_char in adj:
                        found = True
                        found_direction = cur_direction
                        if adj.index(cur_char) == 1:
                            # index 1 in the neighbour token is the shifted key:
                            # 'q' neighbours '2@', where '@' needs shift.
                            shifted_count += 1
                        if last_direction != found_direction:
                            # counts the very first step too: every walk starts with a turn
                            turns += 1
                            last_direction = found_direction
                        break
            if found:
                j += 1
            else:
                # chains of length 1 or 2 are not patterns
                if j - i > 2:
                    matches.append(Match(
                        i, j - 1, password[i:j],
                        SpatialMatch(graph_name, turns, shifted_count),
                    ))
                i = j
                break
    return matches


# ------------------------------------------------------------------------------
# repeats (aaa, abcabcabc) and sequences (abcdef) ------------------------------
# ------------------------------------------------------------------------------

def repeat_match(password: str, ranked_dictionaries: Optional[RankedDicts] = None) -> List[Match]:
    """
    Find runs of a repeated unit. The unit (base token) is matched and
    scored recursively, against the same dictionaries, so 'passwordpassword'
    knows its base is a common word.
    """
    if ranked_dictionaries is None:
        ranked_dictionaries = default_ranked_dicts()
    matches = []
    last_index = 0
    while last_index < len(password):
        greedy_match = GREEDY_RX.search(password, last_index)
        if greedy_match is None:
            break
        lazy_match = LAZY_RX.search(password, last_index)
        if len(greedy_match.group(0)) > len(lazy_match.group(0)):
            # greedy beats lazy for 'aabaab'
            #   greedy: [aabaab, aab]
            #   lazy:   [aa,     a]
            match = greedy_match
            # greedy's unit may itself repeat (aabaab in aabaabaabaab),
            # so find the shortest unit that spans the whole greedy match
            anchored = LAZY_ANCHORED_RX.fullmatch(match.group(0))
            if anchored is None:
                raise RuntimeError("greedy repeat %r has no anchored base token" % match.group(0))
            base_token = anchored.group(1)
        else:
            # lazy beats greedy for 'aaaaa'
            #   greedy: [aaaa,  aa]
            #   lazy:   [aaaaa, a]
            match = lazy_match
            base_token = match.group(1)

        token = match.group(0)
        if len(base_token) >= len(password):
            raise RuntimeError("repeat base token %r does not shrink the input" % base_token)
        i, j = match.start(), match.end() - 1

        _LOGGER.debug("repeat %r at (%d, %d): scoring base token %r", token, i, j, base_token)
        base_analysis = scoring.most_guessable_match_sequence(
            base_token,
            _omnimatch(base_token, ranked_dictionaries),
            exclude_additive=False,
        )
        matches.append(Match(i, j, token, RepeatMatch(
            base_token=base_token,
            base_guesses=base_analysis.guesses,
            base_matches=base_analysis.sequence,
            repeat_count=len(token) // len(base_token),
        )))
        last_index = j + 1
    return matches


def sequence_match(password: str) -> List[Match]:
    """
    Runs with a constant step between code points. Steps other than +-1
    need at least three characters, and steps beyond MAX_DELTA are ignored.

        password: a   b   c   d   b    9   7   5   z   y
        index:    0   1   2   3   4    5   6   7   8   9
        delta:      1   1   1  -2  -41  -2  -2  69   1

    gives [(i, j, delta), ...] = [(0, 3, 1), (5, 7, -2), (8, 9, 1)]
    """
    if len(password) == 1:
        return []

    result = []

    def update(i: int, j: int, delta: int) -> None:
        if j - i > 1 or abs(delta) == 1:
            if 0 < abs(delta) <= MAX_DELTA:
                token = password[i:j + 1]
                if LOWER_RX.fullmatch(token):
                    sequence_name, sequence_space = "lower", 26
                elif UPPER_RX.fullmatch(token):
                    sequence_name, sequence_space = "upper", 26
                elif DIGITS_RX.fullmatch(token):
                    sequence_name, sequence_space = "digits", 10
                else:
                    # conservative default for other alphabets
                    sequence_name, sequence_space = "unicode", 26
                result.append(Match(i, j, token, SequenceMatch(sequence_name, sequence_space, delta > 0)))

    i = 0
    last_delta = None
    for k in range(1, len(password)):
        delta = ord(password[k]) - ord(password[k - 1])
        if last_delta is None:
            last_delta = delta
        if delta == last_delta:
            continue
        j = k - 1
        update(i, j, last_delta)
        i = j
        last_delta = delta
    if last_delta is not None:
        update(i, len(password) - 1, last_delta)
    return result


# ------------------------------------------------------------------------------
# regex matching ---------------------------------------------------------------
# ------------------------------------------------------------------------------

def regex_match(password: str, regexen: Sequence[Tuple[str, "re.Pattern"]] = REGEXEN) -> List[Match]:
    """
    Match each tagged pattern against the whole rest of the password.

    The scan pointer moves past each hit, so a pattern only matches where it
    spans everything from the pointer to the end of the password.
    """
    matches = []
    for name, regex in regexen:
        last_index = 0
        while True:
            rx_match = regex.fullmatch(password, last_index)
            if rx_match is None or rx_match.end() == rx_match.start():
                break
            token = rx_match.group(0)
            matches.append(Match(
                rx_match.start(), rx_match.end() - 1, token,
                RegexMatch(name, (token,) + rx_match.groups()),
            ))
            last_index = rx_match.end()
    return _sorted(matches)


# ------------------------------------------------------------------------------
# date matching ----------------------------------------------------------------
# ------------------------------------------------------------------------------

def date_match(password: str) -> List[Match]:
    """
    A date is a 3-tuple that starts or ends with a 2- or 4-digit year, with
    two separators or none (1.1.91 or 1191), maybe zero padded, a month
    between 1 and 12 and a day between 1 and 31.

    This is not calendar parsing: feb 31st is accepted, leap years are
    ignored. Every substring is tried against an anchored pattern so that
    every possible date is found; dates that sit inside longer dates are
    dropped at the end.
    """
    matches = []
    length = len(password)

    # dates without separators are between length 4 '1191' and 8 '11111991'
    for i in range(length - 3):
        for j in range(i + 3, i + 8):
            if j >= length:
                break
            token = password[i:j + 1]
            if not MAYBE_DATE_NO_SEPARATOR_RX.fullmatch(token):
                continue
            candidates = []
            for k, l in DATE_SPLITS[len(token)]:
                dmy = map_ints_to_dmy((int(token[:k]), int(token[k:l]), int(token[l:])))
                if dmy is not None:
                    candidates.append(dmy)
            if not candidates:
                continue
            # several readings of the same substring: keep the one whose
            # year is nearest the reference year, so '111504' is 11-15-04
            # (2004) rather than 1-1-1504
            best = min(candidates, key=lambda c: abs(c.year - scoring.REFERENCE_YEAR))
            matches.append(Match(i, j, token, DateMatch("", best.year, best.month, best.day)))

    # dates with separators are between length 6 '1/1/91' and 10 '11/11/1991'
    for i in range(length - 5):
        for j in range(i + 5, i + 10):
            if j >= length:
                break
            token = password[i:j + 1]
            rx_match = MAYBE_DATE_WITH_SEPARATOR_RX.fullmatch(token)
            if rx_match is None:
                continue
            dmy = map_ints_to_dmy((int(rx_match.group(1)), int(rx_match.group(3)), int(rx_match.group(4))))
            if dmy is None:
                continue
            matches.append(Match(i, j, token, DateMatch(rx_match.group(2), dmy.year, dmy.month, dmy.day)))

    # '2015_06_04' also yields 15_06_04, 5_06_04, ..., even 2015 (as 20-1-2005):
    # drop every date that is a strict substring of another
    def is_submatch(match: Match) -> bool:
        for other in matches:
            if other.i == match.i and other.j == match.j:
                continue
            if other.i <= match.i and other.j >= match.j:
                return True
        return False

    return _sorted([m for m in matches if not is_submatch(m)])


def map_ints_to_dmy(ints: Tuple[int, int, int]) -> Optional[DMY]:
    """
    Read three ints as a date, or return None. Discarded when:
      the middle int is over 31 (years never sit in the middle) or zero
      any int is over the max allowable year
      any int has three digits (over 99 but under the min allowable year)
      2 ints are over 31, the max allowable day
      2 ints are zero
      all ints are over 12, the max allowable month
    """
    if ints[1] > 31 or ints[1] <= 0:
        return None
    over_12 = 0
    over_31 = 0
    under_1 = 0
    for value in ints:
        if 99 < value < DATE_MIN_YEAR or value > DATE_MAX_YEAR:
            return None
        if value > 31:
            over_31 += 1
        if value > 12:
            over_12 += 1
        if value <= 0:
            under_1 += 1
    if over_31 >= 2 or over_12 == 3 or under_1 >= 2:
        return None

    # first look for a four digit year: yyyy + daymonth or daymonth + yyyy
    possible_year_splits = [
        (ints[2], ints[0:2]),  # year last
        (ints[0], ints[1:3]),  # year first
    ]
    for year, rest in possible_year_splits:
        if DATE_MIN_YEAR <= year <= DATE_MAX_YEAR:
            dm = map_ints_to_dm(rest)
            if dm is None:
                # a four digit year with no day and month beside it is not a date
                return None
            return DMY(year, dm[1], dm[0])

    # no four digit year: the two digit year is the most flexible field, so
    # try to find a day and month in the other two
    for year, rest in possible_year_splits:
        dm = map_ints_to_dm(rest)
        if dm is not None:
            return DMY(two_to_four_digit_year(year), dm[1], dm[0])

    return None


def map_ints_to_dm(ints: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    """Return (day, month) from two ints in either order, or None."""
    for day, month in (ints, ints[::-1]):
        if 1 <= day <= 31 and 1 <= month <= 12:
            return day, month
    return None


def two_to_four_digit_year(year: int) -> int:
    if year > 99:
        return year
    if year > 50:
        # 87 -> 1987
        return year + 1900
    # 15 -> 2015
    return year + 2000
