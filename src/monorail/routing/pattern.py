"""Path template compilation.

Templates are regular expressions with Express-style placeholders::

    /blog/:id             required variable
    /shelf/:tag?/book     optional segment
    /files/(\\d+)\\.txt     raw group, captured under its position ("0")

Every capture becomes a named group ``_v<index>`` in the compiled
regex; the user-facing variable names live in ``CompiledPattern.names``
so arbitrary placeholder names never collide with regex syntax.
"""

import re
from dataclasses import dataclass

from monorail.errors import ConfigurationError

# Opening parenthesis of a capturing group written directly in a template.
_RAW_GROUP = r"(?<!\\)\((?!\?)"

# Opener of a non-capturing or special group: "(?:", "(?=", "(?<!", "(?P<name>"...
# Copied through verbatim so its ":" is never read as a placeholder.
_SPECIAL_GROUP = r"(?<!\\)\(\?(?:P?<\w+>|P=\w+\)|<[=!]|[:=!>]|[aiLmsux-]+[:)])"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An anchored regex plus the variable names it captures, in order."""

    template: str
    regex: re.Pattern[str]
    names: tuple[str, ...]
    prefix: bool = False

    def match(self, path: str) -> dict[str, str] | None:
        """Return the extracted variables, or ``None`` if *path* doesn't match.

        Optional variables that were omitted from the path are absent.
        """
        m = self.regex.match(path)
        if m is None:
            return None
        variables: dict[str, str] = {}
        for index, name in enumerate(self.names):
            value = m.group(f"_v{index}")
            if value is not None:
                variables[name] = value
        return variables


class PatternCompiler:
    """Turns path templates into ``CompiledPattern`` objects.

    Both the placeholder syntax and the default variable pattern are
    plain configuration, set once when the app freezes::

        compiler = PatternCompiler(default_pattern=r"[^/]+")
        pattern = compiler.compile("/users/:id", {"id": r"\\d+"})
        pattern.match("/users/42")  # {"id": "42"}

    The placeholder regex must capture the variable name in group 1 and
    the optional marker in group 2.
    """

    __slots__ = ("_scanner", "default_pattern", "placeholder_pattern")

    def __init__(
        self,
        placeholder_pattern: str = r":(\w+)(\?)?",
        default_pattern: str = r"\w+",
    ) -> None:
        self.placeholder_pattern = placeholder_pattern
        self.default_pattern = default_pattern
        try:
            placeholder = re.compile(placeholder_pattern)
        except re.error as exc:
            msg = f"Invalid placeholder pattern {placeholder_pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc
        if placeholder.groups < 2:
            msg = (
                f"Placeholder pattern {placeholder_pattern!r} must capture the "
                "variable name and the optional marker"
            )
            raise ConfigurationError(msg)
        self._scanner = re.compile(
            f"(?P<special>{_SPECIAL_GROUP})"
            f"|(?P<placeholder>{placeholder_pattern})"
            f"|(?P<group>{_RAW_GROUP})"
        )

    def compile(
        self,
        template: str,
        assertions: dict[str, str] | None = None,
        *,
        prefix: bool = False,
    ) -> CompiledPattern:
        """Compile *template* into an anchored pattern.

        Args:
            template: The path template.
            assertions: Per-variable sub-patterns replacing the default.
            prefix: Match the template as a path prefix (passthrough
                routes) instead of the whole path.

        Raises ``ConfigurationError`` if the resulting regex is invalid.
        """
        assertions = assertions or {}
        body = template.rstrip("/")
        names: list[str] = []
        parts: list[str] = []
        cursor = 0

        for m in self._scanner.finditer(body):
            literal = body[cursor : m.start()]
            cursor = m.end()
            index = len(names)

            if m.group("special") is not None:
                parts.append(literal)
                parts.append(m.group("special"))
                continue

            if m.group("group") is not None:
                names.append(str(index))
                parts.append(literal)
                parts.append(f"(?P<_v{index}>")
                continue

            inner = m.group("placeholder")
            placeholder = re.match(self.placeholder_pattern, inner)
            assert placeholder is not None
            name, optional = placeholder.group(1), placeholder.group(2)
            names.append(name)
            sub = wrap_assertion(assertions[name]) if name in assertions else self.default_pattern
            group = f"(?P<_v{index}>{sub})"

            if not optional:
                parts.append(literal)
                parts.append(group)
            elif literal.endswith("/"):
                # The separator belongs to the optional segment
                parts.append(literal[:-1])
                parts.append(f"(?:/{group})?")
            else:
                parts.append(literal)
                parts.append(f"{group}?")

        parts.append(body[cursor:])
        tail = "(?=/|$)" if prefix else "$"
        source = "^" + "".join(parts) + "/?" + tail

        try:
            regex = re.compile(source)
        except re.error as exc:
            msg = f"Route template {template!r} compiles to an invalid pattern: {exc}"
            raise ConfigurationError(msg) from exc
        return CompiledPattern(template=template, regex=regex, names=tuple(names), prefix=prefix)


def wrap_assertion(pattern: str) -> str:
    """Embed a variable assertion as a non-capturing sub-pattern.

    Leading ``^`` and trailing ``$`` are dropped; the route pattern
    supplies its own anchors.
    """
    if pattern.startswith("^"):
        pattern = pattern[1:]
    if pattern.endswith("$") and not pattern.endswith("\\$"):
        pattern = pattern[:-1]
    return f"(?:{pattern})"


def validate_assertion(name: str, pattern: str) -> None:
    """Raise ``ConfigurationError`` if *pattern* isn't a valid regex."""
    try:
        re.compile(pattern)
    except re.error as exc:
        msg = f"Invalid assertion for {name!r}: {pattern!r} ({exc})"
        raise ConfigurationError(msg) from exc
