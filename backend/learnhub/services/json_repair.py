"""
Recover structured JSON from free-form LLM output.

Models asked for JSON routinely return something close to it instead:

- the payload wrapped in a markdown code fence (```json ... ```), sometimes
  with the closing fence cut off;
- multi-line values written as backtick template strings instead of quoted
  JSON strings;
- an array truncated mid-element when the output token budget ran out;
- raw newlines or tabs inside string values.

ResponseRepairPipeline.repair() tries, in order: fence extraction, a direct
parse, bracket-matching extraction, template-literal normalization,
truncated-array repair, control-character escaping and a final parse. The
first strategy that yields valid JSON wins. Every step is a pure function
over text built on one quote/escape-aware scanner, so each can be tested on
its own.
"""

import json
from typing import Any, Iterator, Optional, Tuple

from learnhub.core.errors import UnparsableAIResponse

FENCE = "```"
_OPENERS = {"{": "}", "[": "]"}
# Regions delimited by these are strings for bracket counting purposes
_STRING_DELIMITERS = ('"', "`")
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}

DEFAULT_PREVIEW_CHARS = 200


def _structural_chars(text: str, start: int = 0) -> Iterator[Tuple[int, str]]:
    """
    Yield (index, char) for every character outside string regions.

    A region opened by a double quote or a backtick ends at the next
    unescaped occurrence of the same delimiter; a delimiter preceded by an
    odd number of backslashes is escaped. The delimiters themselves are not
    yielded.
    """
    quote = None
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in _STRING_DELIMITERS:
            quote = ch
            continue
        yield i, ch


def _first_opening(text: str) -> int:
    """Index of the first '{' or '[' in text, or -1."""
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            return i
    return -1


def _is_language_tag(tag: str) -> bool:
    return all(c.isalnum() or c in "-_+." for c in tag)


def extract_fenced_block(text: str) -> Optional[str]:
    """
    Return the interior of the first markdown code fence, or None.

    An optional language tag (```json) on the opening line is skipped. A
    fence with no closing marker runs to the end of the text, which is what
    truncated output looks like. A fence that appears after the first
    bracket is part of the payload (e.g. code inside a string value) and is
    ignored.
    """
    start = text.find(FENCE)
    if start == -1:
        return None
    first_bracket = _first_opening(text)
    if first_bracket != -1 and first_bracket < start:
        return None

    pos = start + len(FENCE)
    eol = text.find("\n", pos)
    first_line = (text[pos:] if eol == -1 else text[pos:eol]).strip()
    if not first_line or _is_language_tag(first_line):
        body_start = len(text) if eol == -1 else eol + 1
    else:
        # Payload on the same line as the opening fence
        body_start = pos

    end = text.find(FENCE, body_start)
    body = text[body_start:] if end == -1 else text[body_start:end]
    return body.strip()


def match_brackets(text: str) -> Optional[Tuple[str, bool]]:
    """
    Extract the first bracketed value from text.

    Starts at the first '{' or '[' and counts nested brackets of that kind,
    ignoring anything inside string regions, until the depth returns to zero.

    Returns:
        (candidate, terminated), where terminated is False when the text
        ended before the brackets balanced (candidate then runs to the end),
        or None if text contains no opening bracket.
    """
    start = _first_opening(text)
    if start == -1:
        return None
    open_ch = text[start]
    close_ch = _OPENERS[open_ch]
    depth = 0
    for i, ch in _structural_chars(text, start):
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start : i + 1], True
    return text[start:], False


def _find_closing_backtick(text: str, start: int) -> int:
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            return i
        i += 1
    return -1


def _to_json_string(content: str) -> str:
    """Render template-literal content as a double-quoted JSON string."""
    out = ['"']
    i = 0
    while i < len(content):
        ch = content[i]
        if ch == "\\" and content[i + 1 : i + 2] == "`":
            out.append("`")
            i += 2
            continue
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
        i += 1
    out.append('"')
    return "".join(out)


def normalize_template_literals(text: str) -> str:
    """
    Replace backtick-delimited values with double-quoted JSON strings.

    `line1
    line2`  becomes  "line1\\nline2". Backticks inside double-quoted strings
    are left alone, as is a trailing template literal with no closing
    backtick.
    """
    out = []
    in_string = False
    escaped = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
            continue
        if ch == "`":
            end = _find_closing_backtick(text, i + 1)
            if end == -1:
                out.append(text[i:])
                break
            out.append(_to_json_string(text[i + 1 : end]))
            i = end + 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def repair_truncated_array(candidate: str) -> str:
    """
    Close an unterminated top-level array.

    Cuts the candidate just before the last comma seen at depth 1, dropping
    the partial final element, and appends ']'. Without such a comma the
    candidate is closed as is.
    """
    depth = 0
    last_comma = -1
    for i, ch in _structural_chars(candidate):
        if ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
        elif ch == "," and depth == 1:
            last_comma = i
    if last_comma != -1:
        return candidate[:last_comma].rstrip() + "]"
    if candidate.strip():
        return candidate.rstrip() + "]"
    return candidate


def escape_control_characters(text: str) -> str:
    """Escape raw newlines, carriage returns, tabs and other control chars inside JSON strings."""
    out = []
    in_string = False
    escaped = False
    for ch in text:
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            continue
        if escaped:
            escaped = False
            out.append(ch)
        elif ch == "\\":
            escaped = True
            out.append(ch)
        elif ch == '"':
            in_string = False
            out.append(ch)
        elif ch in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


def _try_parse(text: Optional[str]) -> Tuple[bool, Any]:
    if text is None:
        return False, None
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


class ResponseRepairPipeline:
    """
    Tolerant JSON parser for LLM output. Deterministic and side-effect free.

    Usage:
        value = ResponseRepairPipeline().repair(response.content)
    """

    def __init__(self, preview_chars: int = DEFAULT_PREVIEW_CHARS):
        self.preview_chars = preview_chars

    def repair(self, text: str) -> Any:
        """
        Return the JSON value encoded in text.

        Raises:
            UnparsableAIResponse: Every strategy failed. The error carries the
                first preview_chars characters of text.
        """
        text = text or ""
        # Valid JSON is returned as is, even when a string value contains a fence
        ok, value = _try_parse(text)
        if ok:
            return value

        fenced = extract_fenced_block(text)
        ok, value = _try_parse(fenced)
        if ok:
            return value

        match = self._extract_candidate(fenced, text)
        if match is None:
            raise self._unparsable(text)
        candidate, terminated = match

        candidate = normalize_template_literals(candidate)
        if not terminated and candidate.startswith("["):
            candidate = repair_truncated_array(candidate)

        ok, value = _try_parse(candidate)
        if ok:
            return value
        ok, value = _try_parse(escape_control_characters(candidate))
        if ok:
            return value
        raise self._unparsable(text)

    @staticmethod
    def _extract_candidate(fenced: Optional[str], text: str) -> Optional[Tuple[str, bool]]:
        """Bracket-match the fence interior first, then the raw text; prefer a balanced match."""
        first = None
        for source in (fenced, text):
            if source is None:
                continue
            match = match_brackets(source)
            if match is None:
                continue
            if match[1]:
                return match
            if first is None:
                first = match
        return first

    def _unparsable(self, text: str) -> UnparsableAIResponse:
        return UnparsableAIResponse(text[: self.preview_chars])


def repair_json(text: str, preview_chars: int = DEFAULT_PREVIEW_CHARS) -> Any:
    """Shortcut for ResponseRepairPipeline(preview_chars).repair(text)."""
    return ResponseRepairPipeline(preview_chars).repair(text)
