"""Pattern strategies that compute a new file name from an old one."""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable

from bulkrename.errors import PatternCompilationError


# Inline flag that turns on case-insensitive matching when prefixed to a pattern
CASE_INSENSITIVE_FLAG = "(?i)"

# `$$`, `${name}` or `$name` in a replacement template
_REFERENCE_RE = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")

Expander = Callable[[re.Match[str]], str]


def compile_replacement(template: str) -> Expander:
    """Compile a `$`-style replacement template into a match expander.

    `$1` or `${1}` insert a numbered capture group, `$name` or `${name}` a
    named one, and `$$` a literal dollar sign. The reference name is the
    longest run of letters, digits and underscores, so `$1a` refers to a group
    called `1a`; use `${1}a` to follow a group with text. References to groups
    that do not exist or did not participate in the match expand to nothing.
    A number with a leading zero such as `$01` is a name, not group 1.
    Everything else, backslashes included, is copied literally.
    """
    # Literal text is kept as str, group references as (group,) tuples
    pieces: list[str | tuple[int | str]] = []
    last = 0
    for match in _REFERENCE_RE.finditer(template):
        pieces.append(template[last : match.start()])
        last = match.end()
        dollar, braced, bare = match.groups()
        if dollar:
            pieces.append("$")
            continue
        name = braced or bare
        is_number = name.isdigit() and (name == "0" or not name.startswith("0"))
        pieces.append((int(name) if is_number else name,))
    pieces.append(template[last:])

    if all(isinstance(piece, str) for piece in pieces):
        text = "".join(piece for piece in pieces if isinstance(piece, str))
        return lambda _match: text

    def expand(match: re.Match[str]) -> str:
        out = []
        for piece in pieces:
            if isinstance(piece, str):
                out.append(piece)
                continue
            try:
                value = match.group(piece[0])
            except IndexError:
                value = None
            out.append(value or "")
        return "".join(out)

    return expand


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``pattern``, converting syntax errors into PatternCompilationError."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompilationError(pattern, str(e)) from e


class RenameStrategy(ABC):
    """Base class for name transformation strategies.

    Strategies are immutable: ``apply`` always returns the same output for the
    same input and has no side effects.
    """

    @abstractmethod
    def apply(self, name: str) -> str:
        """Compute the new name for ``name``.

        Args:
            name: Original file name (without directory).

        Returns:
            The transformed file name.
        """
        pass


class PatternSource(ABC):
    """Capability shared by the base strategies so they can be wrapped.

    It exposes the raw pattern and replacement text, and whether the pattern
    must be escaped before it can be compiled as a regular expression.
    """

    @property
    @abstractmethod
    def pattern(self) -> str:
        pass

    @property
    @abstractmethod
    def replacement(self) -> str:
        pass

    @property
    @abstractmethod
    def needs_literal_escaping(self) -> bool:
        pass


class ExactMatchStrategy(RenameStrategy, PatternSource):
    """Replace every literal occurrence of a text, left to right."""

    def __init__(self, pattern: str, replacement: str) -> None:
        self._pattern = pattern
        self._replacement = replacement

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def needs_literal_escaping(self) -> bool:
        return True

    def apply(self, name: str) -> str:
        if not self._pattern:
            return name
        return name.replace(self._pattern, self._replacement)

    def __repr__(self) -> str:
        return f"ExactMatchStrategy({self._pattern!r}, {self._replacement!r})"


class RegexMatchStrategy(RenameStrategy, PatternSource):
    """Replace every match of a regular expression.

    The replacement may refer to capture groups with `$1`, `$2`, ... (see
    `compile_replacement`).
    """

    def __init__(self, pattern: str, replacement: str) -> None:
        """Compile the pattern.

        Raises:
            PatternCompilationError: If ``pattern`` is not a valid regular expression.
        """
        self._pattern = pattern
        self._replacement = replacement
        self._regex = compile_pattern(pattern)
        self._expand = compile_replacement(replacement)

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def replacement(self) -> str:
        return self._replacement

    @property
    def needs_literal_escaping(self) -> bool:
        return False

    def apply(self, name: str) -> str:
        return self._regex.sub(self._expand, name)

    def __repr__(self) -> str:
        return f"RegexMatchStrategy({self._pattern!r}, {self._replacement!r})"


class CaseInsensitiveStrategy(RenameStrategy):
    """Decorator that makes the wrapped strategy ignore case when matching.

    The wrapped strategy must implement `PatternSource` for case folding to
    take effect. Any other strategy is applied unchanged.
    """

    def __init__(self, inner: RenameStrategy) -> None:
        self.inner = inner
        self._regex: re.Pattern[str] | None = None
        self._expand: Expander | None = None
        self._noop = False

        if not isinstance(inner, PatternSource):
            return

        pattern = inner.pattern
        if inner.needs_literal_escaping:
            if not pattern:
                self._noop = True
                return
            pattern = re.escape(pattern)
            self._expand = compile_replacement(inner.replacement.replace("$", "$$"))
        else:
            self._expand = compile_replacement(inner.replacement)

        if not pattern.startswith(CASE_INSENSITIVE_FLAG):
            pattern = CASE_INSENSITIVE_FLAG + pattern
        self._regex = compile_pattern(pattern)

    def apply(self, name: str) -> str:
        if self._noop:
            return name
        if self._regex is None or self._expand is None:
            return self.inner.apply(name)
        return self._regex.sub(self._expand, name)

    def __repr__(self) -> str:
        return f"CaseInsensitiveStrategy({self.inner!r})"


def build_strategy(pattern: str, replacement: str, is_regex: bool, case_insensitive: bool) -> RenameStrategy:
    """Create the strategy matching the user's pattern options.

    Raises:
        PatternCompilationError: If ``is_regex`` is set and the pattern is invalid.
    """
    strategy: RenameStrategy
    if is_regex:
        strategy = RegexMatchStrategy(pattern, replacement)
    else:
        strategy = ExactMatchStrategy(pattern, replacement)

    if case_insensitive:
        strategy = CaseInsensitiveStrategy(strategy)

    return strategy
