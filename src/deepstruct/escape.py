"""
String escaping helpers.

escape_regex is used by the containment matcher to build literal
alternation patterns; the others are general purpose.
"""

from __future__ import annotations

import re

from .errors import InvalidArgumentError

_REGEX_SPECIAL = re.compile(r"[\^\$\.\*\+\-\?\=\!\:\|\\\/\(\)\[\]\{\}\,]")
_JSON_UNSAFE = re.compile("[<>&\u2028\u2029]")
_HEADER_ATTRIBUTE = re.compile(r"^[ \w\!#\$%&'\(\)\*\+,\-\.\/\:;<\=>\?@\[\]\^`\{\|\}~\"\\]*$", re.ASCII)

_NAMED_HTML = {
    38: "&amp;",
    60: "&lt;",
    62: "&gt;",
    34: "&quot;",
    160: "&nbsp;",
    162: "&cent;",
    163: "&pound;",
    164: "&curren;",
    169: "&copy;",
    174: "&reg;",
}


def _is_html_safe(code: int) -> bool:
    return (
        97 <= code <= 122          # a-z
        or 65 <= code <= 90        # A-Z
        or 48 <= code <= 57        # 0-9
        or code in (32, 44, 45, 46, 58, 95)   # space , - . : _
    )


def escape_regex(text: str) -> str:
    """Escape ^$.*+-?=!:|\\/()[]{}, so text matches literally in a pattern."""
    return _REGEX_SPECIAL.sub(lambda match: "\\" + match.group(0), text)


def escape_html(text: str) -> str:
    """
    Escape text for inclusion in HTML.

    Letters, digits, space and . , - : _ pass through. Common characters
    use named entities, everything else numeric character references.
    """
    if not text:
        return ""

    escaped = []
    for char in text:
        code = ord(char)
        if _is_html_safe(code):
            escaped.append(char)
        elif code in _NAMED_HTML:
            escaped.append(_NAMED_HTML[code])
        elif code >= 256:
            escaped.append(f"&#{code};")
        else:
            escaped.append(f"&#x{code:02x};")
    return "".join(escaped)


def escape_json(text: str) -> str:
    """Escape characters that are unsafe inside a JSON string embedded in HTML."""
    if not text:
        return ""
    return _JSON_UNSAFE.sub(lambda match: f"\\u{ord(match.group(0)):04x}", text)


def escape_header_attribute(attribute: str) -> str:
    """
    Escape an attribute value for use in an HTTP header.

    Raises:
        InvalidArgumentError: attribute contains characters not allowed in
            a header value
    """
    if not _HEADER_ATTRIBUTE.match(attribute):
        raise InvalidArgumentError(f"Bad attribute value ({attribute})")

    # Backslashes first so the quote escapes are not doubled
    return attribute.replace("\\", "\\\\").replace('"', '\\"')
