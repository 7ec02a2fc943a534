#!/usr/bin/env python3
"""
Copyright 2025 7th software Ltd.

Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance with the
License. You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software distributed under the License is distributed on an
"AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the License for the specific
language governing permissions and limitations under the License.

This module extracts the public method surface of a bundled JavaScript API (such as `sypnex-api.js`) without parsing it.
The bundle is a concatenation of several hand-written files that add methods to a single class, so a couple of textual
passes are enough to recover a method name, its raw parameter list, whether it is `async`, and a one-line description.

# Highlights of Internal Workings

1. **JSDoc-paired pass**: `extract_documented` finds every `/** ... */` block that is immediately followed by a method
   header (`[static] [async] [function] name(params) {`). The first prose line of the block becomes the description.
2. **Bare pass**: `extract_bare` walks the source line by line, skips lines that look like control flow, comments,
   assignments, object-literal entries or known call sites, and tries the same header pattern on a short window starting
   at each remaining line. This picks up the older methods that were never documented.
3. **Merge**: `merge_methods` concatenates both passes (documented first), drops names that can never be API methods,
   and keeps the first occurrence of every name so that a documented method always wins over a bare duplicate.
4. **Descriptions**: `resolve_description` picks the documented text, then a small table of well-known methods, then a
   generated "<name> method from <api>" phrase. The result is always safe to drop into a single-quoted literal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import re


DEFAULT_API_NAME = "the API"

# Lines inspected by the bare pass when looking for a header that wraps before its opening brace
BARE_WINDOW_LINES = 3


# ---- Method descriptor ------------------------------------------------------


@dataclass(frozen=True)
class MethodDescriptor:
    """
    Represents one method of the scanned API.

    Attributes:
        name (str): The method name, unique within one extraction run.
        raw_params (str): The parameter list exactly as written between the parentheses (trimmed).
        is_async (bool): `True` if the header carried the `async` keyword.
        description (str): One-line, literal-safe description; never empty.
        jsdoc (Optional[str]): The raw `/** ... */` block above the method, or `None` when found by the bare pass.
    """

    name: str
    raw_params: str
    is_async: bool
    description: str
    jsdoc: Optional[str] = None


# ---- Text helpers -----------------------------------------------------------


def normalise_newlines(text: str) -> str:
    """
    Convert CRLF and bare CR line endings to LF.
    """

    return text.replace("\r\n", "\n").replace("\r", "\n")


def escape_js_literal(text: str) -> str:
    """
    Escape text for use inside a single-quoted JavaScript/TypeScript string literal.

    Backslashes and both quote characters are escaped, and any run of whitespace (including newlines) is collapsed to a
    single space so that the literal always stays on one line.

    Parameters:
    - `text`: The raw text.

    Returns:
    - The escaped, single-line text.
    """

    text = " ".join(text.split())
    return text.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


def iter_top_level(text: str) -> Iterable[Tuple[int, str, int]]:
    """
    Walk a fragment of JavaScript and report the bracket depth of every character outside string literals.

    This is a tiny tokenizer rather than a parser: it tracks `()`, `[]` and `{}` nesting with a single counter and skips
    over '...', "..." and `...` literals (honouring backslash escapes). Bracket characters are reported at the depth of
    the text that surrounds them. Unbalanced closers never take the depth below zero.

    Parameters:
    - `text`: The fragment to walk, e.g. a parameter list or one source line.

    Yields:
    - Tuples of `(index, char, depth)` for every character that is not inside a string literal.
    """

    depth = 0
    quote = None
    escaped = False

    for i, ch in enumerate(text):
        if quote is not None:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue

        if ch in ("'", '"', "`"):
            quote = ch
            continue

        if ch in ")]}":
            depth = max(0, depth - 1)
            yield i, ch, depth
            continue

        yield i, ch, depth
        if ch in "([{":
            depth += 1


def find_top_level_assignment(text: str) -> int:
    """
    Find the first assignment `=` that sits outside brackets and string literals.

    Comparison and arrow operators (`==`, `===`, `!=`, `<=`, `>=`, `=>`) are not assignments. Compound assignments such
    as `+=` are.

    Parameters:
    - `text`: The fragment to search.

    Returns:
    - The index of the `=`, or -1 if there is none.
    """

    for i, ch, depth in iter_top_level(text):
        if ch != "=" or depth != 0:
            continue
        prev_ch = text[i - 1] if i > 0 else ""
        next_ch = text[i + 1] if i + 1 < len(text) else ""
        if next_ch in ("=", ">") or prev_ch in ("=", "!", "<", ">"):
            continue
        return i
    return -1


def _has_top_level_char(text: str, wanted: str) -> bool:
    return any(ch == wanted and depth == 0 for _, ch, depth in iter_top_level(text))


# ---- Descriptions -----------------------------------------------------------


# Descriptions for methods that are commonly used but historically shipped without a usable JSDoc summary
KNOWN_DESCRIPTIONS: Dict[str, str] = {
    "init": "Initialize the SypnexAPI instance",
    "getSetting": "Get an application setting value",
    "setSetting": "Set an application setting value",
    "getAllSettings": "Get all application settings",
    "deleteSetting": "Delete an application setting",
    "getVirtualFileStats": "Get virtual file system statistics",
    "listVirtualFiles": "List files in virtual file system",
    "readVirtualFile": "Read a file from virtual file system",
    "writeVirtualFile": "Write a file to virtual file system",
    "deleteVirtualItem": "Delete a file or folder from virtual file system",
    "connectSocket": "Connect to a WebSocket",
    "sendMessage": "Send a message through WebSocket",
    "isInitialized": "Check if the API is initialized",
    "getAppId": "Get the current application ID",
    "showNotification": "Show a notification to the user",
    "logInfo": "Log an info message",
    "logError": "Log an error message",
    "executeTerminalCommand": "Execute a terminal command",
    "readVirtualFileText": "Read a text file from virtual file system",
    "readVirtualFileJSON": "Read a JSON file from virtual file system",
    "writeVirtualFileJSON": "Write a JSON file to virtual file system",
    "createVirtualFolder": "Create a folder in virtual file system",
    "createVirtualFile": "Create a file in virtual file system",
    "getVirtualItemInfo": "Get information about a virtual file system item",
    "virtualItemExists": "Check if a virtual file system item exists",
}


def resolve_description(name: str, documented: Optional[str] = None, api_name: str = DEFAULT_API_NAME) -> str:
    """
    Pick the description for a method.

    The order of preference is the description taken from the method's JSDoc block, then the `KNOWN_DESCRIPTIONS`
    table, then a generated "<name> method from <api_name>" phrase.

    Parameters:
    - `name`: The method name.
    - `documented`: The already-escaped description taken from the method's JSDoc block, if any.
    - `api_name`: How the generated phrase refers to the API.

    Returns:
    - A non-empty string that is safe to embed in a single-quoted literal.
    """

    if documented:
        return documented
    if name in KNOWN_DESCRIPTIONS:
        return escape_js_literal(KNOWN_DESCRIPTIONS[name])
    return escape_js_literal(f"{name} method from {api_name}")


def describe_jsdoc(jsdoc: str) -> Optional[str]:
    """
    Take the summary line out of a `/** ... */` block.

    The summary is the first non-empty line that is not a tag line (`@param`, `@returns`, ...), with the comment
    decoration removed, whitespace collapsed and quotes escaped.

    Parameters:
    - `jsdoc`: The raw comment block including its `/**` and `*/` markers.

    Returns:
    - The escaped summary, or `None` if the block has no prose line.
    """

    body = jsdoc.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    for line in normalise_newlines(body).split("\n"):
        text = line.strip().lstrip("*").strip()
        if not text or text.startswith("@"):
            continue
        return escape_js_literal(text)
    return None


# ---- Header patterns --------------------------------------------------------


IDENTIFIER = r"[A-Za-z_$][A-Za-z0-9_$]*"

# [static] [async] [function] name(params) {
_METHOD_HEADER = (
    r"(?<![\w$])"
    r"(?:static\s+)?"
    r"(?:(?P<async>async)\s+)?"
    r"(?:function\s+)?"
    rf"(?P<name>{IDENTIFIER})\s*"
    r"\((?P<params>[^)]*)\)\s*\{"
)

# The comment body may not contain '*/', so each match pairs a header with the nearest comment above it
JSDOC_METHOD_RE = re.compile(r"(?P<jsdoc>/\*\*(?:(?!\*/).)*\*/)\s*" + _METHOD_HEADER, re.DOTALL)

BARE_METHOD_RE = re.compile(_METHOD_HEADER)

VALID_IDENTIFIER_RE = re.compile(rf"^{IDENTIFIER}$")


# ---- JSDoc-paired pass ------------------------------------------------------


def extract_documented(source_blob: str, api_name: str = DEFAULT_API_NAME) -> List[MethodDescriptor]:
    """
    Find every method header that directly follows a JSDoc block.

    Parameters:
    - `source_blob`: The complete JavaScript source.
    - `api_name`: Passed to `resolve_description` for blocks without a prose line.

    Returns:
    - Descriptors in source order. Names are not filtered or de-duplicated here.
    """

    out: List[MethodDescriptor] = []
    for m in JSDOC_METHOD_RE.finditer(normalise_newlines(source_blob)):
        name = m.group("name")
        jsdoc = m.group("jsdoc")
        out.append(MethodDescriptor(
            name=name,
            raw_params=m.group("params").strip(),
            is_async=m.group("async") is not None,
            description=resolve_description(name, describe_jsdoc(jsdoc), api_name),
            jsdoc=jsdoc,
        ))
    return out


# ---- Bare pass --------------------------------------------------------------


# Statements that open with one of these are never method definitions
_DENIED_KEYWORDS = (
    "if", "else", "for", "while", "do", "switch", "case", "default",
    "try", "catch", "finally", "return", "throw",
)

_DENIED_KEYWORD_RE = re.compile(r"^(?:%s)\b" % "|".join(_DENIED_KEYWORDS))

_COMMENT_PREFIXES = ("//", "/*", "*")

# Calls that look like headers once a line is taken out of context
_DENIED_CALLS = ("Object.assign", "console.")


def is_denied_line(line: str) -> bool:
    """
    Decide whether the bare pass should skip a line.

    A line is skipped when it is blank, opens with a control-flow or dispatch keyword (after any closing braces, so
    `} else if (...) {` counts), opens with a comment marker, contains a top-level assignment and no arrow function,
    contains a top-level colon (object-literal entries, CSS declarations, `case` labels), or mentions a known call
    pattern such as `Object.assign(`.

    Parameters:
    - `line`: One line of source.

    Returns:
    - `True` if the line must not be scanned.
    """

    stripped = line.strip()
    if not stripped:
        return True

    if _DENIED_KEYWORD_RE.match(stripped.lstrip("}").lstrip()):
        return True
    if stripped.startswith(_COMMENT_PREFIXES):
        return True
    if find_top_level_assignment(stripped) >= 0 and "=>" not in stripped:
        return True
    if _has_top_level_char(stripped, ":"):
        return True
    if any(call in stripped for call in _DENIED_CALLS):
        return True

    return False


def extract_bare(source_blob: str, api_name: str = DEFAULT_API_NAME) -> List[MethodDescriptor]:
    """
    Find method headers line by line, with or without a preceding comment.

    Each line that survives `is_denied_line` is joined with the following lines (up to `BARE_WINDOW_LINES` in total) so
    that a header whose opening brace wraps onto the next line is still recognised. Only matches that start on the
    line itself are kept; later lines get their own turn.

    Parameters:
    - `source_blob`: The complete JavaScript source.
    - `api_name`: Passed to `resolve_description`.

    Returns:
    - Descriptors in source order, possibly with repeated names. None of them carries a JSDoc block.
    """

    lines = normalise_newlines(source_blob).split("\n")
    out: List[MethodDescriptor] = []

    for i, line in enumerate(lines):
        if is_denied_line(line):
            continue

        window = "\n".join(lines[i:i + BARE_WINDOW_LINES])
        for m in BARE_METHOD_RE.finditer(window):
            if m.start() >= len(line):
                break
            name = m.group("name")
            out.append(MethodDescriptor(
                name=name,
                raw_params=m.group("params").strip(),
                is_async=m.group("async") is not None,
                description=resolve_description(name, None, api_name),
            ))

    return out


# ---- Merge ------------------------------------------------------------------


RESERVED_NAMES = frozenset({
    # Words the bare pass is known to pick up from call sites
    "if", "for", "while", "catch", "try", "switch", "function", "const", "let", "var", "return", "not", "assign",
    # Remaining JavaScript keywords
    "await", "break", "case", "class", "continue", "debugger", "default", "delete", "do", "else", "enum", "export",
    "extends", "false", "finally", "import", "in", "instanceof", "new", "null", "super", "this", "throw", "true",
    "typeof", "void", "with", "yield",
})


def is_api_method_name(name: str) -> bool:
    """
    Check whether a name may appear in the generated method list.

    Private (`_`-prefixed) names, `constructor`, reserved words and anything that is not a plain identifier are
    rejected.
    """

    return (
        bool(VALID_IDENTIFIER_RE.match(name))
        and not name.startswith("_")
        and name != "constructor"
        and name not in RESERVED_NAMES
    )


def merge_methods(documented: List[MethodDescriptor], bare: List[MethodDescriptor]) -> List[MethodDescriptor]:
    """
    Combine the two passes into one ordered list with unique names.

    Parameters:
    - `documented`: Output of `extract_documented`.
    - `bare`: Output of `extract_bare`.

    Returns:
    - The descriptors of `documented + bare`, filtered by `is_api_method_name`, keeping the first occurrence of each
      name.
    """

    seen = set()
    out: List[MethodDescriptor] = []
    for method in list(documented) + list(bare):
        if method.name in seen or not is_api_method_name(method.name):
            continue
        seen.add(method.name)
        out.append(method)
    return out


def extract_methods(source_blob: str, api_name: str = DEFAULT_API_NAME) -> List[MethodDescriptor]:
    """
    Run both passes over a JavaScript API bundle and merge the results.
    """

    return merge_methods(
        extract_documented(source_blob, api_name),
        extract_bare(source_blob, api_name),
    )
