#!/usr/bin/env python3
"""
Copyright 2025 7th software Ltd.

Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance with the
License. You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software distributed under the License is distributed on an
"AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the License for the specific
language governing permissions and limitations under the License.

Turns extracted `MethodDescriptor` records into the TypeScript declaration block consumed by the editor extension, and
splices that block into the extension source between a fixed anchor comment and the closing `];` of the array.

The block looks like this (tab indented):

    // Sypnex API method definitions (auto-generated)
    const sypnexApiMethods = [
        {
            name: 'getSetting',
            signature: 'getSetting(key: any, defaultValue?: any): Promise<any>',
            description: 'Get an application setting value',
            isAsync: true
        }
    ];

Output only depends on the list of descriptors, so regenerating from an unchanged API bundle gives identical bytes.
"""

from __future__ import annotations

from apisync_javascript import MethodDescriptor, escape_js_literal, find_top_level_assignment, iter_top_level
from typing import List, Pattern, Sequence, Tuple
import re


DEFAULT_ANCHOR = "// Sypnex API method definitions"
DEFAULT_ARRAY_NAME = "sypnexApiMethods"
DEFAULT_END_MARKER = "];"


# ---- Signature synthesis ----------------------------------------------------


def split_params(raw_params: str) -> List[str]:
    """
    Split a raw parameter list on its top-level commas.

    Commas nested inside brackets or string literals (e.g. `opts = {a: 1, b: 2}` or `sep = ','`) do not split.
    Empty entries, such as the one after a trailing comma, are dropped.

    Parameters:
    - `raw_params`: The text between a method's parentheses.

    Returns:
    - The trimmed parameter tokens in order.
    """

    tokens: List[str] = []
    start = 0
    for i, ch, depth in iter_top_level(raw_params):
        if ch == "," and depth == 0:
            tokens.append(raw_params[start:i])
            start = i + 1
    tokens.append(raw_params[start:])

    return [t.strip() for t in tokens if t.strip()]


def _param_declaration(token: str) -> str:
    eq = find_top_level_assignment(token)
    if eq >= 0:
        return f"{token[:eq].strip()}?: any"
    return f"{token}: any"


def synthesize_signature(name: str, raw_params: str, is_async: bool) -> str:
    """
    Build a TypeScript-style signature from an untyped parameter list.

    Every parameter is typed `any`. A parameter with a default value (a top-level `=`) is marked optional. The return
    type is `Promise<any>` for async methods and `any` otherwise.

    Parameters:
    - `name`: The method name.
    - `raw_params`: The text between the method's parentheses.
    - `is_async`: Whether the method is `async`.

    Returns:
    - The signature, e.g. `getSetting(key: any, defaultValue?: any): Promise<any>`.
    """

    params = ", ".join(_param_declaration(t) for t in split_params(raw_params))
    return_type = "Promise<any>" if is_async else "any"
    return f"{name}({params}): {return_type}"


def method_signature(method: MethodDescriptor) -> str:
    return synthesize_signature(method.name, method.raw_params, method.is_async)


# ---- Emitter ----------------------------------------------------------------


def _render_method(method: MethodDescriptor) -> str:
    """
    Render one descriptor as a tab-indented object literal (without a trailing comma).
    """

    return (
        "\t{\n"
        f"\t\tname: '{method.name}',\n"
        f"\t\tsignature: '{escape_js_literal(method_signature(method))}',\n"
        f"\t\tdescription: '{method.description}',\n"
        f"\t\tisAsync: {'true' if method.is_async else 'false'}\n"
        "\t}"
    )


def generate_declarations(
    methods: Sequence[MethodDescriptor],
    array_name: str = DEFAULT_ARRAY_NAME,
    anchor: str = DEFAULT_ANCHOR
) -> str:
    """
    Serialise the method list as a `const` array declaration headed by the anchor comment.

    Parameters:
    - `methods`: The merged descriptors, in the order they should appear.
    - `array_name`: Name of the generated constant.
    - `anchor`: The anchor comment; the header line is the anchor followed by ` (auto-generated)`.

    Returns:
    - The block with `\\n` line endings and no trailing newline (the file's own newline after `];` is kept by the
      patcher).
    """

    body = ",\n".join(_render_method(m) for m in methods)
    return (
        f"{anchor} (auto-generated)\n"
        f"const {array_name} = [\n"
        f"{body}\n"
        "];"
    )


# ---- Anchor patcher ---------------------------------------------------------


def anchor_pattern(anchor: str = DEFAULT_ANCHOR, end_marker: str = DEFAULT_END_MARKER) -> Pattern[str]:
    """
    Compile the pattern for the generated region: from a line starting with the anchor through the first line that
    starts with the end marker.
    """

    return re.compile(r"^" + re.escape(anchor) + r".*?^" + re.escape(end_marker), re.MULTILINE | re.DOTALL)


def patch_declarations(
    target_blob: str,
    block: str,
    anchor: str = DEFAULT_ANCHOR,
    end_marker: str = DEFAULT_END_MARKER,
    line_ending: str = "\n"
) -> Tuple[str, bool]:
    """
    Replace the generated region of a consumer file with a new block.

    Only the first region is replaced; everything before and after it is left byte-for-byte intact. If the anchor
    cannot be found the text is returned unchanged.

    Parameters:
    - `target_blob`: The consumer file's current text.
    - `block`: The output of `generate_declarations`.
    - `anchor`: The anchor comment that opens the region.
    - `end_marker`: The line prefix that closes the region.
    - `line_ending`: The consumer file's line ending; the block is converted to it before splicing.

    Returns:
    - A tuple of the patched text and a flag telling whether the region was found.
    """

    if line_ending != "\n":
        block = block.replace("\n", line_ending)

    # A callable replacement keeps the block's backslash escapes literal
    patched, count = anchor_pattern(anchor, end_marker).subn(lambda _m: block, target_blob, count=1)
    return patched, count == 1
