"""
String escape helpers for JavaScript/TypeScript string and template text.

tree-sitter keeps token text with escape sequences preserved (e.g. "\\n").
This module decodes that text to the string value the language defines.
"""

_HEX_CHARS = "0123456789abcdefABCDEF"
_OCT_CHARS = "01234567"
_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_TERMINATORS = ("\n", "\u2028", "\u2029")
_MAX_CODE_POINT = 0x10FFFF


class InvalidEscapeError(ValueError):
    """An escape the grammar accepts but that denotes no string value."""


def _is_high_surrogate(code: int) -> bool:
    return 0xD800 <= code <= 0xDBFF


def _is_low_surrogate(code: int) -> bool:
    return 0xDC00 <= code <= 0xDFFF


def decode_js_string(text: str) -> str:
    """
    Decode the body of a string literal or template chunk (without delimiters).

    Malformed escapes are kept best-effort rather than rejected: the parser has
    already reported them as syntax errors. The one exception is a well-formed
    `\\u{...}` beyond U+10FFFF, which the grammar accepts; it raises
    InvalidEscapeError.
    """
    # Code units, so that 😀 pairs up into one code point at the end.
    units: list[int] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch != "\\":
            units.append(ord(ch))
            i += 1
            continue

        i += 1
        if i >= n:
            units.append(ord("\\"))
            break

        esc = text[i]

        if esc in _SIMPLE_ESCAPES:
            units.append(ord(_SIMPLE_ESCAPES[esc]))
            i += 1
            continue

        # line continuation
        if esc == "\r":
            i += 2 if text[i + 1:i + 2] == "\n" else 1
            continue
        if esc in _LINE_TERMINATORS:
            i += 1
            continue

        if esc == "x":
            digits = text[i + 1:i + 3]
            if len(digits) == 2 and all(c in _HEX_CHARS for c in digits):
                units.append(int(digits, 16))
                i += 3
            else:
                units.append(ord("x"))
                i += 1
            continue

        if esc == "u":
            if text[i + 1:i + 2] == "{":
                end = text.find("}", i + 2)
                digits = text[i + 2:end] if end != -1 else ""
                if digits and all(c in _HEX_CHARS for c in digits):
                    code = int(digits, 16)
                    if code > _MAX_CODE_POINT:
                        raise InvalidEscapeError(f"\\u{{{digits}}} is beyond U+10FFFF")
                    units.append(code)
                    i = end + 1
                    continue
            else:
                digits = text[i + 1:i + 5]
                if len(digits) == 4 and all(c in _HEX_CHARS for c in digits):
                    units.append(int(digits, 16))
                    i += 5
                    continue
            units.append(ord("u"))
            i += 1
            continue

        if esc in _OCT_CHARS:
            # "\0" not followed by a digit is NUL; anything else is legacy octal
            start = i
            limit = 3 if esc in "0123" else 2
            i += 1
            while i < n and text[i] in _OCT_CHARS and i - start < limit:
                i += 1
            units.append(int(text[start:i], 8))
            continue

        # \' \" \\ \` \$ and any other character escape to themselves
        units.append(ord(esc))
        i += 1

    return _units_to_str(units)


def _units_to_str(units: list[int]) -> str:
    out: list[str] = []
    i = 0
    while i < len(units):
        code = units[i]
        if _is_high_surrogate(code) and i + 1 < len(units) and _is_low_surrogate(units[i + 1]):
            low = units[i + 1]
            out.append(chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)))
            i += 2
            continue
        out.append(chr(code))
        i += 1
    return "".join(out)
