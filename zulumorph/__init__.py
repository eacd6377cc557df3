# This file makes the 'zulumorph' directory a Python package.

__version__ = "1.0.0"

from zulumorph.rules import RuleEntry, NounPrefixEntry, RuleTables, default_rule_tables
from zulumorph.parser import (
    Morpheme,
    AnalyzedLine,
    classify_word,
    segment,
    analyze_word,
    analyze_lines,
    analyze_text,
)
from zulumorph.formatter import format_word, format_line, format_text

__all__ = [
    'RuleEntry',
    'NounPrefixEntry',
    'RuleTables',
    'default_rule_tables',
    'Morpheme',
    'AnalyzedLine',
    'classify_word',
    'segment',
    'analyze_word',
    'analyze_lines',
    'analyze_text',
    'format_word',
    'format_line',
    'format_text',
]
