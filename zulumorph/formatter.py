"""
The result formatter (morphemes -> text).

Renders analysed words and lines in the canonical tagged form:

    <LINE 1>u[NPrePre3]-mu[BPre3]-ntu[NStem] .[Punc]
"""


def format_morpheme(morpheme) -> str:
    return f"{morpheme.morph}[{morpheme.tag}]"


def format_word(morphemes) -> str:
    """Join a word's morphemes as ``morph[TAG]`` segments separated by ``-``."""
    return "-".join(format_morpheme(m) for m in morphemes)


def format_line(analyzed_line) -> str:
    """
    Render one analysed line.

    The ``<LINE n>`` marker is followed directly (no space) by the formatted
    words, which are separated by single spaces.
    """
    words = " ".join(format_word(word) for word in analyzed_line.words)
    return f"<LINE {analyzed_line.line_number}>{words}"


def format_text(analyzed_lines) -> str:
    return "\n".join(format_line(line) for line in analyzed_lines)
