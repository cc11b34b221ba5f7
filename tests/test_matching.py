import re

import pytest

from pwmatch.adjacency_graphs import graphs
from pwmatch.matching import (
    DMY,
    L33T_TABLE,
    date_match,
    dictionary_match,
    enumerate_l33t_subs,
    l33t_match,
    map_ints_to_dmy,
    omnimatch,
    regex_match,
    relevant_l33t_subtable,
    repeat_match,
    reverse_dictionary_match,
    sequence_match,
    spatial_match,
    translate,
    two_to_four_digit_year,
)
from pwmatch.patterns import DictionaryMatch, RepeatMatch

TEST_DICTS = {
    "d1": {"motherboard": 1, "mother": 2, "board": 3, "abcd": 4, "cdef": 5},
    "d2": {"z": 1, "8": 2, "99": 3, "$": 4, "asdf1234&*": 5},
}


def spans(matches):
    return [(m.i, m.j) for m in matches]


def test_translate():
    assert translate("p4ssw0rd", {"4": "a", "0": "o"}) == "password"
    assert translate("abc", {}) == "abc"


def test_dictionary_finds_overlapping_words():
    matches = dictionary_match("motherboard", TEST_DICTS)
    assert spans(matches) == [(0, 5), (0, 10), (6, 10)]
    assert [m.data.matched_word for m in matches] == ["mother", "motherboard", "board"]
    assert [m.data.rank for m in matches] == [2, 1, 3]
    assert all(m.data.dictionary_name == "d1" for m in matches)


def test_dictionary_ignores_case_but_keeps_token():
    matches = dictionary_match("BoaRdZ", TEST_DICTS)
    words = {(m.token, m.data.matched_word) for m in matches}
    assert ("BoaRd", "board") in words
    assert ("Z", "z") in words


def test_dictionary_empty_password():
    assert dictionary_match("", TEST_DICTS) == []


def test_reverse_dictionary_maps_coordinates_back():
    dicts = {"d1": {"123": 1, "321": 2, "456": 3, "654": 4}}
    matches = reverse_dictionary_match("0123456789", dicts)
    assert spans(matches) == [(1, 3), (4, 6)]
    assert [m.token for m in matches] == ["123", "456"]
    assert [m.data.matched_word for m in matches] == ["321", "654"]
    assert all(m.data.reversed for m in matches)


def test_relevant_l33t_subtable():
    assert relevant_l33t_subtable("", L33T_TABLE) == {}
    assert relevant_l33t_subtable("abcdefgo123578!#$&*)]}>", L33T_TABLE) == {
        "a": ["4"],
        "b": ["8"],
        "e": ["3"],
        "i": ["1", "!"],
        "l": ["1", "7"],
        "s": ["$", "5"],
        "t": ["7"],
        "z": ["2"],
    }


@pytest.mark.parametrize("table, expected", [
    ({}, [{}]),
    ({"a": ["@"]}, [{"@": "a"}]),
    ({"a": ["@", "4"]}, [{"@": "a"}, {"4": "a"}]),
    ({"a": ["@", "4"], "c": ["("]}, [{"@": "a", "(": "c"}, {"4": "a", "(": "c"}]),
    ({"i": ["1"], "l": ["1"]}, [{"1": "i"}, {"1": "l"}]),
    ({"i": ["1", "!"], "l": ["1"]}, [{"1": "i"}, {"1": "l"}, {"!": "i", "1": "l"}]),
])
def test_enumerate_l33t_subs(table, expected):
    assert enumerate_l33t_subs(table) == expected


def test_l33t_match_requires_a_substitution():
    dicts = {"words": {"password": 3, "aac": 1}}
    assert l33t_match("", dicts) == []
    assert l33t_match("password", dicts) == []


def test_l33t_match_single_substitution():
    dicts = {"words": {"password": 3, "aac": 1}}
    [match] = l33t_match("p4ssword", dicts)
    assert (match.i, match.j) == (0, 7)
    assert match.token == "p4ssword"
    assert match.data.matched_word == "password"
    assert match.data.rank == 3
    assert match.data.l33t
    assert match.data.sub == {"4": "a"}
    assert match.data.sub_display == "4 -> a"


def test_l33t_match_keeps_only_used_subs():
    dicts = {"words": {"password": 3, "ass": 7}}
    matches = l33t_match("p@ssw0rd", dicts)
    by_word = {m.data.matched_word: m for m in matches}
    assert by_word["password"].data.sub == {"@": "a", "0": "o"}
    assert by_word["password"].data.sub_display == "@ -> a, 0 -> o"
    assert by_word["ass"].token == "@ss"
    assert by_word["ass"].data.sub == {"@": "a"}


def test_l33t_match_drops_single_characters():
    assert l33t_match("1", {"words": {"i": 1, "l": 2}}) == []


def test_l33t_match_skips_unsubstituted_tokens():
    matches = l33t_match("4a", {"w": {"aa": 1, "a": 2}})
    assert spans(matches) == [(0, 1)]
    assert matches[0].token == "4a"


def test_spatial_match_straight_row():
    qwerty = {"qwerty": graphs()["qwerty"]}
    [match] = spatial_match("qwerty", qwerty)
    assert (match.i, match.j, match.token) == (0, 5, "qwerty")
    assert match.data.graph == "qwerty"
    assert match.data.turns == 1
    assert match.data.shifted_count == 0


def test_spatial_match_counts_shifted_keys():
    qwerty = {"qwerty": graphs()["qwerty"]}
    [match] = spatial_match("QWErty", qwerty)
    assert match.data.shifted_count == 3
    assert match.data.turns == 1


def test_spatial_match_counts_turns():
    qwerty = {"qwerty": graphs()["qwerty"]}
    [match] = spatial_match("zxcvfr", qwerty)
    assert match.data.turns == 2


def test_spatial_match_keypad():
    [match] = spatial_match("159", {"keypad": graphs()["keypad"]})
    assert (match.i, match.j) == (0, 2)
    assert match.data.turns == 1
    assert match.data.shifted_count == 0


@pytest.mark.parametrize("password", ["", "q", "qw", "qwX", "éêë"])
def test_spatial_match_ignores_short_or_unknown(password):
    assert spatial_match(password, {"qwerty": graphs()["qwerty"]}) == []


def test_spatial_match_finds_embedded_walk():
    matches = spatial_match("rz!6tfGHJ%z", {"qwerty": graphs()["qwerty"]})
    assert ("6tfGHJ", 3, 8) in [(m.token, m.i, m.j) for m in matches]


def test_repeat_match_single_character():
    [match] = repeat_match("aaaaa")
    assert (match.i, match.j) == (0, 4)
    assert isinstance(match.data, RepeatMatch)
    assert match.data.base_token == "a"
    assert match.data.repeat_count == 5
    assert match.data.base_guesses > 0


def test_repeat_match_nested_unit():
    [match] = repeat_match("aabaabaabaab")
    assert (match.i, match.j) == (0, 11)
    assert match.data.base_token == "aab"
    assert match.data.repeat_count == 4


def test_repeat_match_prefers_lazy_on_tie():
    [match] = repeat_match("abcabc12")
    assert (match.i, match.j, match.token) == (0, 5, "abcabc")
    assert match.data.base_token == "abc"
    assert match.data.repeat_count == 2


def test_repeat_match_several_runs():
    matches = repeat_match("aaxbb")
    assert spans(matches) == [(0, 1), (3, 4)]
    assert [m.data.base_token for m in matches] == ["a", "b"]


@pytest.mark.parametrize("password", ["", "abcd", "a"])
def test_repeat_match_none(password):
    assert repeat_match(password) == []


def test_repeat_match_scores_base_with_dictionaries():
    [match] = repeat_match("passwordpassword")
    assert match.data.base_token == "password"
    assert any(isinstance(m.data, DictionaryMatch) and m.data.matched_word == "password"
               for m in match.data.base_matches)


def test_sequence_match_codepoint_deltas():
    matches = sequence_match("abcdb975zy")
    assert spans(matches) == [(0, 3), (5, 7), (8, 9)]
    assert [m.data.sequence_name for m in matches] == ["lower", "digits", "lower"]
    assert [m.data.ascending for m in matches] == [True, False, False]


@pytest.mark.parametrize("password", ["", "a", "ac", "aaa", "agm", "1"])
def test_sequence_match_none(password):
    assert sequence_match(password) == []


@pytest.mark.parametrize("password, name, space, ascending", [
    ("ab", "lower", 26, True),
    ("ace", "lower", 26, True),
    ("ZYX", "upper", 26, False),
    ("13579", "digits", 10, True),
    ("αβγ", "unicode", 26, True),
])
def test_sequence_match_classification(password, name, space, ascending):
    [match] = sequence_match(password)
    assert (match.i, match.j) == (0, len(password) - 1)
    assert match.data.sequence_name == name
    assert match.data.sequence_space == space
    assert match.data.ascending is ascending


def test_regex_match_recent_years():
    [match] = regex_match("1999")
    assert (match.i, match.j, match.token) == (0, 3, "1999")
    assert match.data.regex_name == "recent_year"
    assert match.data.regex_match == ("1999",)


@pytest.mark.parametrize("password", ["abc1999", "1999abc", "19991922", "2020", ""])
def test_regex_match_needs_the_whole_remainder(password):
    assert regex_match(password) == []


def test_regex_match_runs_every_pattern():
    regexen = [("digits", re.compile(r"[0-9]+")), ("letters", re.compile(r"[a-z]+"))]
    matches = regex_match("2019", regexen)
    assert [(m.i, m.j, m.data.regex_name) for m in matches] == [(0, 3, "digits")]
    assert regex_match("ab12", regexen) == []


@pytest.mark.parametrize("ints, expected", [
    ((1, 1, 1991), DMY(1991, 1, 1)),
    ((31, 12, 1999), DMY(1999, 12, 31)),
    ((2015, 6, 4), DMY(2015, 4, 6)),
    ((1, 1, 91), DMY(1991, 1, 1)),
    ((15, 6, 4), DMY(2004, 6, 15)),
    ((1, 0, 1991), None),
    ((1, 32, 91), None),
    ((99, 99, 99), None),
    ((13, 13, 13), None),
    ((0, 1, 0), None),
    ((1, 1, 999), None),
    ((1, 1, 2051), None),
    ((1991, 13, 13), None),
])
def test_map_ints_to_dmy(ints, expected):
    assert map_ints_to_dmy(ints) == expected


@pytest.mark.parametrize("year, expected", [(87, 1987), (15, 2015), (50, 2050), (51, 1951), (0, 2000), (100, 100)])
def test_two_to_four_digit_year(year, expected):
    assert two_to_four_digit_year(year) == expected


def test_date_match_prefers_year_near_reference():
    [match] = date_match("111504")
    assert (match.i, match.j) == (0, 5)
    assert match.data.separator == ""
    assert (match.data.year, match.data.month, match.data.day) == (2004, 11, 15)


def test_date_match_drops_nested_dates():
    [match] = date_match("2015_06_04")
    assert (match.i, match.j) == (0, 9)
    assert match.data.separator == "_"
    assert (match.data.year, match.data.month, match.data.day) == (2015, 4, 6)


def test_date_match_with_separator_inside_text():
    [match] = date_match("ab1.1.91cd")
    assert (match.i, match.j, match.token) == (2, 7, "1.1.91")
    assert (match.data.year, match.data.month, match.data.day) == (1991, 1, 1)


@pytest.mark.parametrize("password", ["", "1/1-91", "abc", "123"])
def test_date_match_none(password):
    assert date_match(password) == []


@pytest.mark.parametrize("password", ["2015_06_04", "111504", "1/1/91 and 12251999", "19911231x20001010"])
def test_date_match_no_strict_substrings(password):
    matches = date_match(password)
    for m in matches:
        for other in matches:
            if (other.i, other.j) == (m.i, m.j):
                continue
            assert not (other.i <= m.i and other.j >= m.j)


OMNI_PASSWORDS = [
    "",
    "r0sebudmaelstrom11/20/91aaaa",
    "P@ssw0rd1990",
    "abcdb975zy",
    "qwertyuiop[]zxcv",
    "aabaabaabaab",
    "Tr0ub4dour&3",
    "correcthorsebatterystaple",
]


@pytest.mark.parametrize("password", OMNI_PASSWORDS)
def test_omnimatch_bounds_and_order(password):
    matches = omnimatch(password)
    for m in matches:
        assert 0 <= m.i <= m.j < len(password)
    keys = [(m.i, m.j) for m in matches]
    assert keys == sorted(keys)


@pytest.mark.parametrize("password", OMNI_PASSWORDS)
def test_omnimatch_token_fidelity(password):
    for m in omnimatch(password):
        if m.pattern in ("dictionary", "spatial"):
            assert m.token == password[m.i:m.j + 1]


@pytest.mark.parametrize("password", OMNI_PASSWORDS)
def test_omnimatch_l33t_rules(password):
    for m in omnimatch(password):
        if m.pattern == "dictionary" and m.data.l33t:
            assert len(m.token) > 1
            assert m.token.lower() != m.data.matched_word


def test_omnimatch_is_deterministic():
    password = "r0sebudmaelstrom11/20/91aaaa"
    assert omnimatch(password) == omnimatch(password)


def test_omnimatch_sequence_scenario():
    matches = [m for m in omnimatch("abcdb975zy") if m.pattern == "sequence"]
    assert spans(matches) == [(0, 3), (5, 7), (8, 9)]


def test_omnimatch_user_inputs():
    matches = omnimatch("alice1990", ["Alice", "Smith"])
    user = [m for m in matches if m.pattern == "dictionary" and m.data.dictionary_name == "user_inputs"]
    assert [(m.i, m.j, m.data.matched_word, m.data.rank) for m in user] == [(0, 4, "alice", 1)]


def test_omnimatch_user_inputs_with_non_ascii_capitals():
    matches = omnimatch("École", ["École"])
    user = [m for m in matches if m.pattern == "dictionary" and m.data.dictionary_name == "user_inputs"]
    assert [(m.i, m.j, m.data.matched_word, m.data.rank) for m in user] == [(0, 4, "École", 1)]


def test_omnimatch_does_not_modify_caller_dictionaries():
    dicts = {"d1": {"abc": 1}}
    omnimatch("abc", ["xyz"], dicts)
    assert list(dicts) == ["d1"]


def test_omnimatch_finds_every_kind():
    patterns = {m.pattern for m in omnimatch("password1990qwertyaaaa13579 11/20/91")}
    assert patterns >= {"dictionary", "spatial", "repeat", "sequence", "date"}


def test_omnimatch_recent_year_runs_to_the_end():
    [match] = [m for m in omnimatch("1999") if m.pattern == "regex"]
    assert (match.i, match.j) == (0, 3)
    assert not [m for m in omnimatch("abc1999") if m.pattern == "regex"]


def test_omnimatch_rejects_non_strings():
    with pytest.raises(TypeError):
        omnimatch(None)
