"""
Natural-language time resolution for catch-up playback.

- Grammar: free text -> ranked date candidates
- Resolver: best candidate -> past-only ParsedTime with a description
"""

from zappingtv.timeparse.grammar import (
    CompositeGrammar,
    DateCandidate,
    DateparserGrammar,
    RelativeGrammar,
    TimeGrammar,
    default_grammar,
)
from zappingtv.timeparse.resolver import (
    EXAMPLES,
    ParsedTime,
    current_timestamp,
    describe,
    format_timestamp,
    get_examples,
    is_resolvable,
    local_now,
    resolve,
)

__all__ = [
    "CompositeGrammar",
    "DateCandidate",
    "DateparserGrammar",
    "EXAMPLES",
    "ParsedTime",
    "RelativeGrammar",
    "TimeGrammar",
    "current_timestamp",
    "default_grammar",
    "describe",
    "format_timestamp",
    "get_examples",
    "is_resolvable",
    "local_now",
    "resolve",
]
