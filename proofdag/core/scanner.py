"""
Text scanning helpers shared by both certificate parsers.

Nothing here understands formulas. The helpers classify lines, pull out
balanced-parenthesis regions and quoted attribute values, and strip the
escape sequences DOT labels use for record delimiters.

A helper that cannot find what it is looking for returns an empty string
(or an empty container) rather than raising.
"""

import re

ALETHE_KEYWORDS = {
    "assume": "(assume",
    "step": "(step",
    "conclusion": "(cl",
    "rule": ":rule",
    "premises": ":premises",
    "arguments": ":args",
    "discharge": ":discharge",
}

# Characters a DOT record label escapes with a backslash.
ESCAPABLE = frozenset('"><{}|')

_STEP_LINE = re.compile(r"^\(step.*\)$")
_ASSUME_LINE = re.compile(r"^\(assume.*\)$")
_ATTRIBUTE = re.compile(r'(\w+)\s*=\s*("(?:[^"\\]|\\.)*"|[^\s,;\]]+)')
_UNESCAPED_BAR = re.compile(r"(?<!\\)\|")


def is_step_line(line: str) -> bool:
    return bool(_STEP_LINE.match(line))


def is_assume_line(line: str) -> bool:
    return bool(_ASSUME_LINE.match(line))


def keep_line(line: str) -> bool:
    """Empty lines and anchor lines carry no proof step."""
    return bool(line) and "anchor" not in line


def remove_escaped_characters(s: str) -> str:
    r"""Drop the backslash in \" \> \< \{ \} \|; every other character is kept."""
    out = []
    i = 0
    while i < len(s):
        if s[i] == "\\" and i + 1 < len(s) and s[i + 1] in ESCAPABLE:
            i += 1
            continue
        out.append(s[i])
        i += 1
    return "".join(out)


def escape_label(s: str) -> str:
    """Inverse of remove_escaped_characters, for writing DOT labels."""
    return "".join("\\" + ch if ch in ESCAPABLE else ch for ch in s)


def find_enclosed_text(s: str, word: str, start: int = 0) -> str:
    """
    Text inside the first balanced (...) that follows `word`.

    find_enclosed_text("x :premises (a (b c)) y", ":premises") -> "a (b c)"

    Returns "" when the word or the opening parenthesis is missing. An
    unbalanced region runs to the end of the string.
    """
    word_index = s.find(word, start)
    if word_index == -1:
        return ""
    open_index = s.find("(", word_index + len(word))
    if open_index == -1:
        return ""

    depth = 1
    i = open_index
    while depth and i < len(s) - 1:
        i += 1
        if s[i] == "(":
            depth += 1
        elif s[i] == ")":
            depth -= 1
    if depth:
        return s[open_index + 1:]
    return s[open_index + 1:i]


def join_strings(a: str, b: str) -> str:
    if not a:
        return b
    if not b:
        return a
    return f"{a} {b}"


def split_statements(body: str) -> list:
    """
    Split a DOT body on ';' that sit outside quotes and outside braces.

    A subgraph block therefore stays one statement even when its own
    attributes are ';'-separated, and its closing brace ends it.
    """
    statements = []
    current = []
    depth = 0
    in_quotes = False
    i = 0
    while i < len(body):
        ch = body[i]
        if in_quotes:
            current.append(ch)
            if ch == "\\" and i + 1 < len(body):
                current.append(body[i + 1])
                i += 1
            elif ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
            current.append(ch)
        elif ch == "{":
            depth += 1
            current.append(ch)
        elif ch == "}":
            depth = max(depth - 1, 0)
            current.append(ch)
            # A closed block ends its statement even without a ';'
            if depth == 0:
                statements.append("".join(current).strip())
                current = []
        elif ch == ";" and depth == 0:
            statements.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return [s for s in statements if s]


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def parse_attributes(text: str) -> dict:
    """
    key=value pairs of a DOT attribute list, values unquoted but still escaped.

    parse_attributes('label="a|b", comment="{}"') -> {"label": "a|b", "comment": "{}"}
    """
    return {key: strip_quotes(value) for key, value in _ATTRIBUTE.findall(text)}


def bracket_contents(statement: str) -> str:
    """Text between the first '[' and the last ']' of a statement."""
    start = statement.find("[")
    end = statement.rfind("]")
    if start == -1 or end <= start:
        return ""
    return statement[start + 1:end]


def split_record(label: str) -> list:
    """Fields of a record label split on unescaped '|', outer braces removed."""
    label = label.strip()
    if label.startswith("{") and label.endswith("}") and not label.endswith("\\}"):
        label = label[1:-1]
    return _UNESCAPED_BAR.split(label)
