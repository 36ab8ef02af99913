"""
Bosun markup formatter: <<markup>> to VT100/ANSI control codes.

Grammar
- A markup span is '<<', one or more style keywords, then '>>'.
  • Keywords come from the closed CODES table and are matched case-insensitively.
  • Keywords are separated by whitespace (any amount, newlines included); whitespace
    is also allowed right after '<<' and right before '>>'.
  • A span ends at the first '>>' that follows a valid keyword list (shortest match).
- Anything else is literal text: unknown keywords, '<<>>', unbalanced delimiters.
  Malformed markup is never an error.

Rendering
- posix=True: each span becomes ESC '[' <codes joined by ';'> 'm', codes in the
  order the keywords were written.
- posix=False: each span is deleted, including spans formed by the deletion of
  another one, so a second pass over stripped text is a no-op. Stripping is a
  single linear pass.

Examples
    >>> format("<<bold>> hi <<reset>>", True)
    '\\x1b[1m hi \\x1b[0m'
    >>> format("<<bold>> hi <<reset>>", False)
    ' hi '
    >>> format("<<nope>>", True)
    '<<nope>>'

Keyword table (ANSI/VT100 terminal control reference)
- reset 0, bold 1, dim 2, ul 4, blink 5, reverse 7
- black red green yellow blue magenta cyan white: 30..37
- the same colors suffixed with 'bg': 40..47
"""
from types import MappingProxyType

CODES = MappingProxyType({
    "reset":     "0",
    "bold":      "1",
    "dim":       "2",
    "ul":        "4",
    "blink":     "5",
    "reverse":   "7",
    "black":     "30",
    "red":       "31",
    "green":     "32",
    "yellow":    "33",
    "blue":      "34",
    "magenta":   "35",
    "cyan":      "36",
    "white":     "37",
    "blackbg":   "40",
    "redbg":     "41",
    "greenbg":   "42",
    "yellowbg":  "43",
    "bluebg":    "44",
    "magentabg": "45",
    "cyanbg":    "46",
    "whitebg":   "47",
})

OPEN = "<<"
CLOSE = ">>"
ESCAPE = "\x1b"

# Same set as the \s class of the terminal-markup regex dialects
_WHITESPACE = frozenset(" \t\n\r\f\v")


def _is_letter(char, /):
    return char.isascii() and char.isalpha()


def _scan(text, index, /):
    """
    Read a markup span whose opening delimiter starts at `index`.

    Returns
    - (end, keywords) where `end` is the index right after '>>' and `keywords`
      is the list of lowercased keywords in written order.
    - None when the text at `index` is not a valid span.
    """
    length = len(text)
    pivot = index + len(OPEN)
    keywords = []
    while True:
        start = pivot
        while pivot < length and text[pivot] in _WHITESPACE:
            pivot += 1
        if keywords and text.startswith(CLOSE, pivot):
            return pivot + len(CLOSE), keywords
        # Keywords must be separated from each other ('<<boldred>>' is literal)
        if keywords and pivot == start:
            return None

        start = pivot
        while pivot < length and _is_letter(text[pivot]):
            pivot += 1
        if (keyword := text[start:pivot].lower()) not in CODES:
            return None
        keywords.append(keyword)


def _escape(keywords, /):
    return ESCAPE + "[" + ";".join(CODES[keyword] for keyword in keywords) + "m"


def _substitute(text, /):
    parts = []
    anchor = index = 0
    while (index := text.find(OPEN, index)) != -1:
        if (span := _scan(text, index)) is None:
            index += 1
            continue
        end, keywords = span
        parts.append(text[anchor:index])
        parts.append(_escape(keywords))
        anchor = index = end
    parts.append(text[anchor:])
    return "".join(parts)


def _collapse(buffer, /):
    """
    Delete the span that closes at the end of `buffer`, if there is one.
    """
    end = len(buffer) - len(CLOSE)
    start = end
    while start and (buffer[start - 1] in _WHITESPACE or _is_letter(buffer[start - 1])):
        start -= 1
    if start < len(OPEN) or "".join(buffer[start - len(OPEN):start]) != OPEN:
        return
    keywords = "".join(buffer[start:end]).lower().split()
    if keywords and all(keyword in CODES for keyword in keywords):
        del buffer[start - len(OPEN):]


def _strip(text, /):
    # Spans are deleted as soon as they close, so a span formed by joining the
    # text around a deleted one ('<<<<bold>>bold>>') goes in the same pass
    buffer = []
    for char in text:
        buffer.append(char)
        if char == ">" and len(buffer) >= len(CLOSE) and buffer[-2] == ">":
            _collapse(buffer)
    return "".join(buffer)


def format(text, posix, /):
    """
    Convert <<markup>> spans in text to control codes, or strip them.

    Parameters
    - text: str
      Text that may contain markup spans.
    - posix: bool
      When True, spans become escape sequences; when False, they are removed.

    Returns
    - str: the rendered text. Text without spans is returned unchanged.

    Raises
    - TypeError: when text is not a string.
    """
    if not isinstance(text, str):
        raise TypeError("format() first argument must be a string")
    return _substitute(text) if posix else _strip(text)


def strip(text, /):
    """
    Remove every markup span from text (same as format(text, False)).
    """
    return format(text, False)


__all__ = (
    "CODES",
    "format",
    "strip",
)
