"""Ordered rule tables for the Zulu morphological segmenter.

Every table is an ordered tuple of entries. When more than one pattern could
match, the entry declared first wins; the engine never looks for the longest
match. The tables are built once and shared read-only by every analysis.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleEntry:
    """A single (pattern -> tag) association."""
    pattern: str
    tag: str


@dataclass(frozen=True)
class NounPrefixEntry(RuleEntry):
    """A noun-class prefix; also carries the integer noun class."""
    noun_class: int = 0


# -----------------------------------------------------------------------------
# --- Declarations (order is significant)
# -----------------------------------------------------------------------------

# (pattern, noun class). "umu" is declared twice: class 1 then class 3.
NOUN_PREFIX_DECLARATIONS = (
    ("umu", 1),
    ("aba", 2),
    ("umu", 3),
    ("imi", 4),
    ("ili", 5),
    ("ama", 6),
    ("isi", 7),
    ("izi", 8),
    ("in", 9),
    ("izin", 10),
    ("ulu", 11),
    ("ubu", 14),
    ("uku", 15),
)

NOUN_CLASS_BASIC_PREFIXES = {
    1: "mu", 2: "ba", 3: "mu", 4: "mi", 5: "li", 6: "ma",
    7: "si", 8: "zi", 9: "n", 10: "zin", 11: "lu", 14: "bu", 15: "ku",
}

VERB_EXTENSION_DECLARATIONS = (
    ("el", "ApplExt"),    # applicative
    ("an", "RecExt"),     # reciprocal
    ("akal", "NeutExt"),  # neuter
    ("is", "CausExt"),    # causative
    ("w", "PassExt"),     # passive
)

COMMON_MORPHEME_DECLARATIONS = (
    ("nga", "AdvPre"),
    ("ka", "AdvPre"),
    ("na", "AdvPre"),
    ("ku", "LocPre"),
    ("e", "LocPre"),
    ("s", "PreLoc-s"),
    ("wa", "PossConc3"),
    ("ya", "PossConc4"),
    ("za", "PossConc10"),
    ("kwa", "PossConc15"),
    ("ng", "CopPre"),
    ("o", "RelConc3"),
    ("ezi", "RelConc10"),
    ("eli", "RelConc5"),
    ("aba", "RelConc2"),
)

QUANTIFIER_DECLARATIONS = (
    ("dwa", "QuantStem"),
    ("nye", "AdjStem"),
    ("bili", "AdjStem"),
)

# Keys are matched exactly as written; lookups use the lowercased word, so the
# capitalised keys below are never hit by the classifier.
VOCABULARY_DECLARATIONS = (
    ("jongo", "NStem"),
    ("konzo", "NStem"),
    ("website", "Foreign"),
    ("Ningizimu", "ProperName"),
    ("Afrika", "ProperName"),
    ("thol", "VRoot"),
    ("thombo", "NStem"),
    ("azi", "NStem"),
    ("hulumeni", "NStem"),
    ("phungul", "VRoot"),
    ("gebe", "NStem"),
    ("khona", "Adv"),
    ("phakathi", "Adv"),
    ("ndla", "NStem"),
    ("notho", "NStem"),
    ("khakha", "NStem"),
    ("qal", "VRoot"),
)

# Common verb roots. Informational only, the segmenter does not consult them.
KNOWN_VERB_ROOTS = (
    "thol", "phungul", "qal", "phak", "khon", "fund", "bon", "sebenz", "hlol",
)


def ordered_declarations(pairs: Iterable[Tuple[str, object]], table: str = "rules") -> Tuple[Tuple[str, object], ...]:
    """
    Collapse repeated patterns the way an insertion-ordered mapping does.

    A repeated pattern keeps the position of its first declaration but takes
    the value of its last one. Each shadowed declaration is logged.
    """
    positions = {}
    result = []
    for pattern, value in pairs:
        if pattern in positions:
            index = positions[pattern]
            logger.warning(
                f"Duplicate pattern '{pattern}' in {table}: "
                f"{result[index][1]!r} is shadowed by {value!r}"
            )
            result[index] = (pattern, value)
        else:
            positions[pattern] = len(result)
            result.append((pattern, value))
    return tuple(result)


@dataclass(frozen=True)
class RuleTables:
    """Immutable, ordered rule collections queried by the segmentation engine."""
    noun_prefixes: Tuple[NounPrefixEntry, ...] = ()
    common_morphemes: Tuple[RuleEntry, ...] = ()
    verb_extensions: Tuple[RuleEntry, ...] = ()
    quantifiers: Tuple[RuleEntry, ...] = ()
    vocabulary: Tuple[RuleEntry, ...] = ()
    basic_prefixes: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze whatever sequence/mapping types the caller handed us
        object.__setattr__(self, "noun_prefixes", tuple(self.noun_prefixes))
        object.__setattr__(self, "common_morphemes", tuple(self.common_morphemes))
        object.__setattr__(self, "verb_extensions", tuple(self.verb_extensions))
        object.__setattr__(self, "quantifiers", tuple(self.quantifiers))
        object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        object.__setattr__(self, "basic_prefixes", MappingProxyType(dict(self.basic_prefixes)))

    @classmethod
    def from_declarations(
        cls,
        noun_prefixes=(),
        common_morphemes=(),
        verb_extensions=(),
        quantifiers=(),
        vocabulary=(),
        basic_prefixes=None,
    ) -> "RuleTables":
        """
        Build tables from ordered (pattern, value) declarations.

        Noun prefixes are declared as (pattern, noun_class) and get the tag
        ``NPrePre<class>``; every other table is declared as (pattern, tag).
        """
        return cls(
            noun_prefixes=tuple(
                NounPrefixEntry(pattern, f"NPrePre{noun_class}", noun_class)
                for pattern, noun_class in ordered_declarations(noun_prefixes, "noun prefixes")
            ),
            common_morphemes=tuple(
                RuleEntry(p, t) for p, t in ordered_declarations(common_morphemes, "common morphemes")
            ),
            verb_extensions=tuple(
                RuleEntry(p, t) for p, t in ordered_declarations(verb_extensions, "verb extensions")
            ),
            quantifiers=tuple(
                RuleEntry(p, t) for p, t in ordered_declarations(quantifiers, "quantifiers")
            ),
            vocabulary=tuple(
                RuleEntry(p, t) for p, t in ordered_declarations(vocabulary, "vocabulary")
            ),
            basic_prefixes=basic_prefixes or {},
        )

    # --- Queries ---

    def first_noun_prefix(self, remaining: str) -> Optional[NounPrefixEntry]:
        for entry in self.noun_prefixes:
            if remaining.startswith(entry.pattern):
                return entry
        return None

    def first_common_morpheme(self, remaining: str) -> Optional[RuleEntry]:
        for entry in self.common_morphemes:
            if remaining.startswith(entry.pattern):
                return entry
        return None

    def first_contained_extension(self, remaining: str) -> Optional[Tuple[int, RuleEntry]]:
        """
        Find the first extension (in declared order) found inside `remaining`.

        Only the first occurrence of each pattern is considered; if it sits at
        index 0 the pattern is skipped even when it occurs again later.
        """
        for entry in self.verb_extensions:
            index = remaining.find(entry.pattern)
            if index > 0:
                return index, entry
        return None

    def match_quantifier(self, remaining: str) -> Optional[RuleEntry]:
        for entry in self.quantifiers:
            if remaining == entry.pattern:
                return entry
        return None

    def lookup_vocabulary(self, word: str) -> Optional[RuleEntry]:
        """Exact vocabulary lookup; keys are compared as declared."""
        for entry in self.vocabulary:
            if word == entry.pattern:
                return entry
        return None

    def basic_prefix(self, noun_class: int) -> Optional[str]:
        return self.basic_prefixes.get(noun_class)

    def summary(self) -> dict:
        """Entry counts per table."""
        return {
            "noun_prefixes": len(self.noun_prefixes),
            "common_morphemes": len(self.common_morphemes),
            "verb_extensions": len(self.verb_extensions),
            "quantifiers": len(self.quantifiers),
            "vocabulary": len(self.vocabulary),
            "basic_prefixes": len(self.basic_prefixes),
        }


# Singleton instance
_default_tables: Optional[RuleTables] = None


def default_rule_tables() -> RuleTables:
    """
    Get the shared default rule tables.

    Built on first use and reused afterwards; the instance is immutable so it
    is safe to share between threads.
    """
    global _default_tables

    if _default_tables is None:
        _default_tables = RuleTables.from_declarations(
            noun_prefixes=NOUN_PREFIX_DECLARATIONS,
            common_morphemes=COMMON_MORPHEME_DECLARATIONS,
            verb_extensions=VERB_EXTENSION_DECLARATIONS,
            quantifiers=QUANTIFIER_DECLARATIONS,
            vocabulary=VOCABULARY_DECLARATIONS,
            basic_prefixes=NOUN_CLASS_BASIC_PREFIXES,
        )

    return _default_tables
