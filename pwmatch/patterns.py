"""
pwmatch.patterns

Match value object plus one payload dataclass per pattern kind.
A Match always carries exactly one payload; `Match.pattern` names it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass
class DictionaryMatch:
    dictionary_name: str
    matched_word: str
    rank: int
    reversed: bool = False
    l33t: bool = False
    sub: Dict[str, str] = field(default_factory=dict)
    sub_display: str = ""


@dataclass
class SpatialMatch:
    graph: str
    turns: int
    shifted_count: int


@dataclass
class RepeatMatch:
    base_token: str
    base_guesses: Decimal
    base_matches: List["Match"]
    repeat_count: int


@dataclass
class SequenceMatch:
    sequence_name: str  # lower, upper, digits or unicode
    sequence_space: int
    ascending: bool


@dataclass
class RegexMatch:
    regex_name: str
    regex_match: Tuple[str, ...]  # group(0) followed by the captured groups


@dataclass
class DateMatch:
    separator: str
    year: int
    month: int
    day: int


@dataclass
class BruteforceMatch:
    """Gap filler produced by scoring, never by a matcher."""


Pattern = Union[
    DictionaryMatch,
    SpatialMatch,
    RepeatMatch,
    SequenceMatch,
    RegexMatch,
    DateMatch,
    BruteforceMatch,
]

_PATTERN_NAMES = {
    DictionaryMatch: "dictionary",
    SpatialMatch: "spatial",
    RepeatMatch: "repeat",
    SequenceMatch: "sequence",
    RegexMatch: "regex",
    DateMatch: "date",
    BruteforceMatch: "bruteforce",
}


@dataclass
class Match:
    i: int
    j: int
    token: str
    data: Pattern
    # filled in by scoring.estimate_guesses
    guesses: Optional[Decimal] = None

    @property
    def pattern(self) -> str:
        return _PATTERN_NAMES[type(self.data)]

    def as_dict(self) -> Dict[str, Any]:
        """JSON friendly rendering (used by the CLI and the API)."""
        out: Dict[str, Any] = {
            "pattern": self.pattern,
            "i": self.i,
            "j": self.j,
            "token": self.token,
        }
        d = self.data
        if isinstance(d, RepeatMatch):
            out.update({
                "base_token": d.base_token,
                "base_guesses": float(d.base_guesses),
                "base_matches": [m.as_dict() for m in d.base_matches],
                "repeat_count": d.repeat_count,
            })
        elif isinstance(d, RegexMatch):
            out.update({"regex_name": d.regex_name, "regex_match": list(d.regex_match)})
        elif isinstance(d, DictionaryMatch):
            out.update({
                "dictionary_name": d.dictionary_name,
                "matched_word": d.matched_word,
                "rank": d.rank,
                "reversed": d.reversed,
                "l33t": d.l33t,
                "sub": dict(d.sub),
                "sub_display": d.sub_display,
            })
        elif not isinstance(d, BruteforceMatch):
            out.update(vars(d))
        if self.guesses is not None:
            out["guesses"] = float(self.guesses)
        return out
