"""Compile restricted globs (`*`, `**`, `?`, leading `!`) into anchored regexes."""
import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Callable, Iterable

QUESTION_MARK = "[^/]"
WILD_SINGLE = "[^/]*"
WILD_OPEN = "(?:.+\\/)?"

# Applied in order, so inserted wildcards are never re-escaped.
TO_ESCAPE_BASE = [
    (".", "\\."),
    ("+", "\\+"),
    ("*", WILD_SINGLE),
]
TO_ESCAPE_WILDCARD_QM = TO_ESCAPE_BASE + [("?", QUESTION_MARK)]
TO_ESCAPE_LITERAL_QM = TO_ESCAPE_BASE + [("?", "\\?")]


@dataclass(frozen=True)
class CompiledPattern:
    """A single compiled glob: polarity plus its anchored regex source."""
    positive: bool
    regex: str
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.regex))

    def test(self, candidate: str) -> bool:
        """Whether the regex matches the whole candidate.

        Snapshot paths are rooted at `/`, so a relative candidate is also
        tried in its root-anchored form.
        """
        if self._compiled.fullmatch(candidate):
            return True
        if not candidate.startswith("/"):
            return self._compiled.fullmatch("/" + candidate) is not None
        return False


def glob_to_regex(glob: str, literal_question_mark: bool = False) -> str:
    """
    Translate a glob into an (unanchored) regular expression body.

    Args:
        glob: Pattern using `*` (one segment), `**` (any depth) and `?`
        literal_question_mark: Escape `?` instead of treating it as a
            single-character wildcard (URLs use `?` for query strings)

    Returns:
        Regex source with segments joined by an escaped `/`
    """
    to_escape = TO_ESCAPE_LITERAL_QM if literal_question_mark else TO_ESCAPE_WILDCARD_QM
    segments = glob.split("/")
    regex = ""
    for idx, segment in enumerate(segments):
        is_last = idx == len(segments) - 1
        if segment == "**":
            regex += ".*" if is_last else WILD_OPEN
        else:
            processed = reduce(lambda seg, esc: seg.replace(esc[0], esc[1]), to_escape, segment)
            regex += processed
            if not is_last:
                regex += "\\/"
    return regex


def compile_glob(pattern: str, literal_question_mark: bool = False) -> CompiledPattern:
    """Compile one glob; a leading `!` makes it negative."""
    positive = not pattern.startswith("!")
    body = pattern if positive else pattern[1:]
    return CompiledPattern(
        positive=positive,
        regex="^" + glob_to_regex(body, literal_question_mark) + "$",
    )


def matches(candidate: str, patterns: Iterable[CompiledPattern]) -> bool:
    """
    Left fold over the pattern list, starting from no match.

    A positive pattern can only turn a non-match into a match; a negative
    pattern can only turn a match into a non-match.
    """
    def step(is_match: bool, pattern: CompiledPattern) -> bool:
        if pattern.positive:
            return is_match or pattern.test(candidate)
        return is_match and not pattern.test(candidate)

    return reduce(step, patterns, False)


def glob_list_to_matcher(globs: Iterable[str]) -> Callable[[str], bool]:
    """Build a predicate matching candidates against an ordered glob list."""
    patterns = [compile_glob(glob) for glob in globs]
    return lambda candidate: matches(candidate, patterns)
