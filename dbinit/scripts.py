"""SQL script splitting — turn a script into individual statements.

The splitter understands single/double quoted literals, ``--`` line comments and
``/* */`` block comments. Separators, comments and runs of whitespace inside a
literal are kept as written; outside literals comments are dropped and whitespace
collapses to a single space.
"""

from __future__ import annotations

from typing import Iterator

from dbinit.errors import ScriptParseError

DEFAULT_STATEMENT_SEPARATOR = ";"
FALLBACK_STATEMENT_SEPARATOR = "\n"
DEFAULT_COMMENT_PREFIXES = ("--",)
DEFAULT_BLOCK_COMMENT_START = "/*"
DEFAULT_BLOCK_COMMENT_END = "*/"


def _tokens(
    script: str,
    separator: str,
    comment_prefixes: tuple[str, ...],
    block_comment_start: str,
    block_comment_end: str,
) -> Iterator[tuple[str, str]]:
    """Yield ``(kind, text)`` pairs: kind is "sep", "space" or "text"."""
    if not separator:
        raise ValueError("separator must not be empty")
    in_single = False
    in_double = False
    escaped = False
    i = 0
    n = len(script)
    while i < n:
        c = script[i]
        if escaped:
            escaped = False
            yield "text", c
            i += 1
            continue
        if c == "\\" and (in_single or in_double):
            escaped = True
            yield "text", c
            i += 1
            continue
        if c == "'" and not in_double:
            in_single = not in_single
        elif c == '"' and not in_single:
            in_double = not in_double
        if in_single or in_double or c in "'\"":
            yield "text", c
            i += 1
            continue

        if script.startswith(separator, i):
            yield "sep", separator
            i += len(separator)
            continue
        prefix = next((p for p in comment_prefixes if script.startswith(p, i)), None)
        if prefix is not None:
            eol = script.find("\n", i)
            if eol == -1:
                break
            # The newline may itself be the separator.
            i = eol
            if separator == FALLBACK_STATEMENT_SEPARATOR:
                continue
            yield "space", " "
            i += 1
            continue
        if script.startswith(block_comment_start, i):
            end = script.find(block_comment_end, i + len(block_comment_start))
            if end == -1:
                raise ScriptParseError(
                    f"Missing block comment end delimiter {block_comment_end!r}"
                )
            yield "space", " "
            i = end + len(block_comment_end)
            continue
        if c.isspace():
            yield "space", " "
        else:
            yield "text", c
        i += 1


def split_sql_script(
    script: str,
    separator: str = DEFAULT_STATEMENT_SEPARATOR,
    comment_prefixes: tuple[str, ...] = DEFAULT_COMMENT_PREFIXES,
    block_comment_start: str = DEFAULT_BLOCK_COMMENT_START,
    block_comment_end: str = DEFAULT_BLOCK_COMMENT_END,
) -> list[str]:
    """Split a SQL script into trimmed, non-empty statements."""
    statements: list[str] = []
    current: list[str] = []
    pending_space = False

    def flush() -> None:
        statement = "".join(current).strip()
        if statement:
            statements.append(statement)
        current.clear()

    for kind, text in _tokens(
        script, separator, comment_prefixes, block_comment_start, block_comment_end
    ):
        if kind == "sep":
            flush()
            pending_space = False
        elif kind == "space":
            pending_space = True
        else:
            if pending_space and current:
                current.append(" ")
            pending_space = False
            current.append(text)
    flush()
    return statements


def contains_statement_separator(
    script: str,
    separator: str = DEFAULT_STATEMENT_SEPARATOR,
    comment_prefixes: tuple[str, ...] = DEFAULT_COMMENT_PREFIXES,
    block_comment_start: str = DEFAULT_BLOCK_COMMENT_START,
    block_comment_end: str = DEFAULT_BLOCK_COMMENT_END,
) -> bool:
    """Whether ``separator`` occurs outside literals and comments."""
    return any(
        kind == "sep"
        for kind, _ in _tokens(
            script, separator, comment_prefixes, block_comment_start, block_comment_end
        )
    )
