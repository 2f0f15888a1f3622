"""
IssueTwin - duplicate issue detection from title similarity.

Normalizes two phrases, aligns their words with a Damerau-Levenshtein based
similarity and scores how likely they describe the same topic.
"""

__version__ = "0.2.0"

# Export the comparison engine for external use
from .config import DEFAULT_THRESHOLD
from .dictionaries import Dictionaries, load_dictionaries
from .distance import distance
from .errors import DegenerateAggregationError, DictionaryError, InvalidInputError
from .normalize import normalize, tokenize
from .similarity import ERROR_ADJ, PhraseComparison, TokenMatch, compare, compare_detailed, similarity

__all__ = [
    "DEFAULT_THRESHOLD",
    "ERROR_ADJ",
    "DegenerateAggregationError",
    "DictionaryError",
    "Dictionaries",
    "InvalidInputError",
    "PhraseComparison",
    "TokenMatch",
    "__version__",
    "compare",
    "compare_detailed",
    "distance",
    "load_dictionaries",
    "normalize",
    "similarity",
    "tokenize",
]
