"""A rule-driven morphological segmenter for Zulu.

Each word goes through two layers:

1. Word classifier: fast paths for punctuation, exact vocabulary hits and
   capitalised proper names. The first fast path that applies is the answer.
2. Segmentation engine: a greedy left-to-right stripper over a single cursor
   (`remaining`). Each pass tries the six rules in order and commits to the
   first one that applies:

   1. noun-class prefix
   2. common morpheme
   3. verb extension (root split)
   4. verb termination "-a"
   5. quantifier (exact)
   6. fallback noun stem (stops the loop)

There is no backtracking. The engine is a total function over strings and
keeps no state between calls beyond the shared, immutable RuleTables.
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from .formatter import format_text
from .logging_config import log_with_context
from .rules import RuleTables, default_rule_tables

logger = logging.getLogger(__name__)

PUNCTUATION = frozenset({".", ",", "!", "?", ";", ":"})

# Word separators. Unlike str.split(), the ASCII information separators
# \x1c-\x1f and NEL (\x85) are not whitespace here, while the BOM (\ufeff) is.
WHITESPACE_CHARS = (
    "\t\n\x0b\x0c\r \u00a0\u1680"
    + "".join(chr(c) for c in range(0x2000, 0x200b))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
WHITESPACE_RE = re.compile(f"[{re.escape(WHITESPACE_CHARS)}]+")


@dataclass(frozen=True)
class Morpheme:
    """A surface substring paired with its grammatical tag."""
    morph: str
    tag: str

    def to_dict(self) -> dict:
        return {"morph": self.morph, "tag": self.tag}


@dataclass(frozen=True)
class AnalyzedLine:
    """The analyses of one kept (non-blank) line, numbered from 1."""
    line_number: int
    words: Tuple[Tuple[Morpheme, ...], ...]


# -----------------------------------------------------------------------------
# --- Layer 1: Word classifier (fast paths)
# -----------------------------------------------------------------------------

def _punctuation(word: str, tables: RuleTables) -> Optional[Tuple[Morpheme, ...]]:
    if word in PUNCTUATION:
        return (Morpheme(word, "Punc"),)
    return None


def _vocabulary(word: str, tables: RuleTables) -> Optional[Tuple[Morpheme, ...]]:
    lower_word = word.lower()
    entry = tables.lookup_vocabulary(lower_word)
    if entry is not None:
        return (Morpheme(lower_word, entry.tag),)
    return None


def _proper_name(word: str, tables: RuleTables) -> Optional[Tuple[Morpheme, ...]]:
    # ASCII capitals only
    if len(word) > 2 and "A" <= word[0] <= "Z":
        return (Morpheme(word, "ProperName"),)
    return None


FAST_PATHS: Tuple[Callable[[str, RuleTables], Optional[Tuple[Morpheme, ...]]], ...] = (
    _punctuation,
    _vocabulary,
    _proper_name,
)


def classify_word(word: str, tables: Optional[RuleTables] = None) -> Optional[Tuple[Morpheme, ...]]:
    """
    Run the classifier fast paths in order.

    Returns the single-morpheme analysis of the first fast path that applies,
    or None when the word has to go through the segmentation engine.
    """
    tables = tables or default_rule_tables()
    for fast_path in FAST_PATHS:
        result = fast_path(word, tables)
        if result is not None:
            return result
    return None


# -----------------------------------------------------------------------------
# --- Layer 2: Segmentation engine (transition rules)
# -----------------------------------------------------------------------------

class Transition(NamedTuple):
    """Outcome of one rule: the new cursor, what it emitted, and whether to stop."""
    remaining: str
    emitted: Tuple[Morpheme, ...]
    stop: bool = False


def strip_noun_prefix(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """
    Rule 1: noun-class prefix.

    Emits only the first character of the matched prefix (plus the class's
    basic prefix for multi-character patterns) but consumes the whole pattern.
    """
    entry = tables.first_noun_prefix(remaining)
    if entry is None:
        return None
    emitted = [Morpheme(entry.pattern[0], entry.tag)]
    if len(entry.pattern) > 1:
        basic = tables.basic_prefix(entry.noun_class)
        if basic:
            emitted.append(Morpheme(basic, f"BPre{entry.noun_class}"))
    return Transition(remaining[len(entry.pattern):], tuple(emitted))


def strip_common_morpheme(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """Rule 2: common morpheme at the start of the cursor."""
    entry = tables.first_common_morpheme(remaining)
    if entry is None:
        return None
    return Transition(remaining[len(entry.pattern):], (Morpheme(entry.pattern, entry.tag),))


def split_verb_extension(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """Rule 3: everything before a contained extension is a verb root."""
    found = tables.first_contained_extension(remaining)
    if found is None:
        return None
    index, entry = found
    return Transition(
        remaining[index + len(entry.pattern):],
        (Morpheme(remaining[:index], "VRoot"), Morpheme(entry.pattern, entry.tag)),
    )


def split_verb_termination(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """Rule 4: a trailing "a" after at least one character ends the verb."""
    if len(remaining) > 1 and remaining.endswith("a"):
        return Transition("", (Morpheme(remaining[:-1], "VRoot"), Morpheme("a", "VerbTerm")))
    return None


def match_quantifier(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """Rule 5: the whole cursor is a quantifier stem."""
    entry = tables.match_quantifier(remaining)
    if entry is None:
        return None
    return Transition("", (Morpheme(remaining, entry.tag),))


def fallback_stem(remaining: str, tables: RuleTables) -> Optional[Transition]:
    """Rule 6: whatever is left is a noun stem."""
    return Transition("", (Morpheme(remaining, "NStem"),), stop=True)


SEGMENTATION_RULES: Tuple[Callable[[str, RuleTables], Optional[Transition]], ...] = (
    strip_noun_prefix,
    strip_common_morpheme,
    split_verb_extension,
    split_verb_termination,
    match_quantifier,
    fallback_stem,
)


def segment(remaining: str, tables: Optional[RuleTables] = None) -> Tuple[Morpheme, ...]:
    """
    Greedily strip `remaining` (already lowercased) into morphemes.

    Every committed rule either shrinks the cursor, empties it, or stops the
    loop, so the loop runs at most len(remaining) times.
    """
    tables = tables or default_rule_tables()
    morphemes: List[Morpheme] = []

    while remaining:
        for rule in SEGMENTATION_RULES:
            transition = rule(remaining, tables)
            if transition is not None:
                break
        log_with_context(
            f"Rule {rule.__name__} applied",
            context={"remaining": remaining, "emitted": transition.emitted},
        )
        morphemes.extend(transition.emitted)
        remaining = transition.remaining
        if transition.stop:
            break

    return tuple(morphemes)


def analyze_word(word: str, tables: Optional[RuleTables] = None) -> Tuple[Morpheme, ...]:
    """
    Analyse a single word into a non-empty sequence of morphemes.

    Never raises on string input. The empty string yields a single
    ``Unknown`` morpheme.
    """
    tables = tables or default_rule_tables()

    classified = classify_word(word, tables)
    if classified is not None:
        return classified

    morphemes = segment(word.lower(), tables)
    return morphemes if morphemes else (Morpheme(word, "Unknown"),)


# -----------------------------------------------------------------------------
# --- Layer 3: Line analyzer
# -----------------------------------------------------------------------------

def split_words(line: str) -> List[str]:
    return [word for word in WHITESPACE_RE.split(line) if word]


def split_lines(text: str) -> List[str]:
    """Split on newlines and drop blank or whitespace-only lines."""
    return [line for line in text.split("\n") if line.strip(WHITESPACE_CHARS)]


def analyze_line(line: str, line_number: int, tables: Optional[RuleTables] = None) -> AnalyzedLine:
    tables = tables or default_rule_tables()
    words = tuple(analyze_word(word, tables) for word in split_words(line))
    return AnalyzedLine(line_number=line_number, words=words)


def analyze_lines(
    text: str,
    tables: Optional[RuleTables] = None,
    workers: Optional[int] = None,
) -> List[AnalyzedLine]:
    """
    Analyse every non-blank line of `text`.

    Kept lines are renumbered from 1 with no gaps. With ``workers > 1`` lines
    are analysed on a thread pool; results always come back in line order.
    """
    tables = tables or default_rule_tables()
    lines = split_lines(text)
    numbers = range(1, len(lines) + 1)

    if workers and workers > 1 and len(lines) > 1:
        logger.debug(f"Analysing {len(lines)} lines with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zulumorph") as executor:
            return list(executor.map(lambda args: analyze_line(args[0], args[1], tables), zip(lines, numbers)))

    return [analyze_line(line, number, tables) for line, number in zip(lines, numbers)]


def analyze_text(
    text: str,
    tables: Optional[RuleTables] = None,
    workers: Optional[int] = None,
) -> str:
    """
    Analyse a text blob and return the canonical ``<LINE n>`` representation.

    Example:
        >>> analyze_text("jongo .")
        '<LINE 1>jongo[NStem] .[Punc]'
    """
    return format_text(analyze_lines(text, tables=tables, workers=workers))


def analyze_words(words: Sequence[str], tables: Optional[RuleTables] = None) -> List[dict]:
    """Analyse several words and return JSON-friendly records."""
    tables = tables or default_rule_tables()
    return [
        {"word": word, "morphemes": [m.to_dict() for m in analyze_word(word, tables)]}
        for word in words
    ]
