from .matching import omnimatch
from .patterns import (
    DateMatch,
    DictionaryMatch,
    Match,
    RegexMatch,
    RepeatMatch,
    SequenceMatch,
    SpatialMatch,
)
from .scoring import most_guessable_match_sequence

__all__ = [
    "omnimatch",
    "most_guessable_match_sequence",
    "Match",
    "DictionaryMatch",
    "SpatialMatch",
    "RepeatMatch",
    "SequenceMatch",
    "RegexMatch",
    "DateMatch",
]
