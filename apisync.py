#!/usr/bin/env python3
"""
Copyright 2025 7th software Ltd.

Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance with the
License. You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software distributed under the License is distributed on an
"AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the License for the specific
language governing permissions and limitations under the License.

This program keeps the editor extension's list of Sypnex API methods in sync with the API itself. It reads the bundled
`sypnex-api.js`, extracts every public method (name, parameters, async flag and a one-line description), renders the
`sypnexApiMethods` declaration block and writes it over the previous generated block in `src/extension.ts`.

Run it whenever the API bundle changes. With no arguments it uses the paths relative to the extension's root folder;
every path and marker can be overridden on the command line.
"""

from __future__ import annotations

from apisync_codegen import DEFAULT_ANCHOR, DEFAULT_ARRAY_NAME, generate_declarations, patch_declarations
from apisync_javascript import DEFAULT_API_NAME, MethodDescriptor, extract_methods
from apisync_log import echo, error, set_verbosity, warn
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import argparse


DEFAULT_SOURCE = "./sypnex-api.js"
DEFAULT_TARGET = "./src/extension.ts"

# Exit code used by --strict when the run completed but produced a suspicious result
EXIT_STRICT = 2


class ApiSyncError(Exception):
    """
    Base class for errors that abort a sync run.
    """


class SourceNotFoundError(ApiSyncError):
    """
    Raised when the API bundle to scan does not exist.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(f"API file not found: {path}")
        self.path = path


@dataclass(frozen=True)
class SyncConfig:
    """
    Everything a sync run needs to know.

    Attributes:
        source_path (Path): The JavaScript API bundle to scan.
        target_paths (Tuple[Path, ...]): Consumer files whose generated block is replaced in place.
        output_path (Optional[Path]): Write the patched consumer here instead of in place (single target only).
        anchor (str): The comment line that opens the generated block.
        array_name (str): Name of the generated constant.
        api_name (str): How generated descriptions refer to the API.
        strict (bool): Turn an empty method list or a missing anchor into a non-zero exit code.
    """

    source_path: Path = Path(DEFAULT_SOURCE)
    target_paths: Tuple[Path, ...] = (Path(DEFAULT_TARGET),)
    output_path: Optional[Path] = None
    anchor: str = DEFAULT_ANCHOR
    array_name: str = DEFAULT_ARRAY_NAME
    api_name: str = DEFAULT_API_NAME
    strict: bool = False


# ---------------------------- File handling ----------------------------


def detect_line_ending(blob: str) -> str:
    """
    Return the most common line ending in a text: '\\r\\n', '\\r' or '\\n' (the default for text without newlines).
    """

    count_rn = blob.count("\r\n")
    count_r = blob.count("\r") - count_rn  # bare \r not part of \r\n
    count_n = blob.count("\n") - count_rn  # bare \n not part of \r\n

    if count_rn > max(count_r, count_n):
        return "\r\n"
    return "\r" if count_r > count_n else "\n"


def read_text(path: Path) -> Tuple[str, str]:
    """
    Load a text file without altering any of its bytes.

    Parameters:
    - `path`: The file to read.

    Returns:
    - A tuple of the file's text and its line ending string.

    Notes:
    - Undecodable bytes are carried through as surrogate escapes so that `write_text` reproduces them exactly.
    - `OSError` (including `FileNotFoundError`) propagates to the caller.
    """

    raw = path.read_bytes()
    blob = raw.decode("utf-8", errors="surrogateescape")
    return blob, detect_line_ending(blob)


def write_text(path: Path, blob: str) -> None:
    path.write_bytes(blob.encode("utf-8", errors="surrogateescape"))


def load_source(src_path: Path) -> str:
    """
    Load the API bundle.

    Raises:
    - `SourceNotFoundError` if `src_path` is not a file.
    """

    echo(f"Reading API file '{src_path}'...")
    if not src_path.is_file():
        raise SourceNotFoundError(src_path)

    source_blob, _ = read_text(src_path)
    return source_blob


# ---------------------------- Pipeline ----------------------------


def print_summary(methods: List[MethodDescriptor]) -> None:
    print(f"Found {len(methods)} methods:")
    for method in methods:
        async_marker = "async " if method.is_async else ""
        print(f"   - {async_marker}{method.name}({method.raw_params})")


def sync_api(cfg: SyncConfig) -> int:
    """
    Regenerate the method declarations in every consumer file from the API bundle.

    The bundle is read first, so a missing bundle aborts before anything is written. All consumer files are read
    before any of them is written.

    Parameters:
    - `cfg`: The run configuration.

    Returns:
    - 0 on success, or `EXIT_STRICT` if `cfg.strict` is set and no methods were found or a consumer file had no anchor.

    Raises:
    - `SourceNotFoundError` if the bundle is missing; `OSError` if a consumer file cannot be read or written.
    """

    source_blob = load_source(cfg.source_path)

    echo("Extracting methods...")
    methods = extract_methods(source_blob, cfg.api_name)
    print_summary(methods)

    suspicious = False
    if not methods:
        warn(f"no methods found in {cfg.source_path}; the generated block will be empty")
        suspicious = True

    echo("Generating declarations...")
    block = generate_declarations(methods, cfg.array_name, cfg.anchor)

    targets = [(path, read_text(path)) for path in cfg.target_paths]
    for path, (target_blob, line_ending) in targets:
        echo(f"Updating '{path}'...")
        patched, found = patch_declarations(target_blob, block, cfg.anchor, line_ending=line_ending)
        if not found:
            warn(f"anchor '{cfg.anchor}' not found in {path}; file left unchanged")
            suspicious = True

        dst_path = cfg.output_path or path
        write_text(dst_path, patched)
        echo(f"Updated source written to {dst_path}")

    if suspicious and cfg.strict:
        return EXIT_STRICT

    echo("Extension updated successfully!")
    return 0


# ---------------------------- CLI harness ----------------------------


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments and return an argparse.Namespace object.

    Parameters:
    - argv: Optional list of strings to parse as command-line arguments. If not provided, sys.argv[1:] is used.
    - source: Path to the JavaScript API bundle (default: ./sypnex-api.js).
    - target: Consumer file to update; may be repeated (default: ./src/extension.ts).
    - output: Write the patched consumer to this file instead of in place (single target only).
    - anchor: Comment line that opens the generated block.
    - array-name: Name of the generated constant.
    - api-name: How generated descriptions refer to the API.
    - strict: Exit non-zero if no methods are found or the anchor is missing.
    - verbose: Output progress information to stdout.

    Returns:
    - An argparse.Namespace object containing the parsed arguments.
    """

    p = argparse.ArgumentParser(description="APISYNC: regenerate editor method declarations from a JavaScript API bundle")
    p.add_argument("--source", "-s", default=DEFAULT_SOURCE, help="Path to the JavaScript API bundle")
    p.add_argument("--target", "-t", action="append", default=None, help="Consumer file to update (repeatable)")
    p.add_argument("--output", "-o", default="", help="Optional output filename instead of updating the target in place")
    p.add_argument("--anchor", "-a", default=DEFAULT_ANCHOR, help="Comment line that opens the generated block")
    p.add_argument("--array-name", default=DEFAULT_ARRAY_NAME, help="Name of the generated constant")
    p.add_argument("--api-name", default=DEFAULT_API_NAME, help="How generated descriptions refer to the API")
    p.add_argument("--strict", action="store_true", help="Exit non-zero if no methods are found or the anchor is missing")
    p.add_argument("--verbose", "-v", action="store_true", help="Output progress information to stdout")

    args = p.parse_args(argv)
    if args.output and args.target and len(args.target) > 1:
        p.error("--output can only be used with a single --target")
    return args


def config_from_args(args: argparse.Namespace) -> SyncConfig:
    targets = args.target or [DEFAULT_TARGET]
    return SyncConfig(
        source_path=Path(args.source),
        target_paths=tuple(Path(t) for t in targets),
        output_path=Path(args.output) if args.output else None,
        anchor=args.anchor,
        array_name=args.array_name,
        api_name=args.api_name,
        strict=args.strict,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point. Parses the command line, runs the sync and reports any failure.

    Returns:
    - rc: 0 on success, 1 if the run was aborted by an error, `EXIT_STRICT` for a suspicious result under --strict.
    """

    args = _parse_args(argv)
    set_verbosity(args.verbose)
    cfg = config_from_args(args)

    try:
        return sync_api(cfg)
    except SourceNotFoundError as e:
        error(f"Error: {e}")
        error("Hint: pass --source with the path to your sypnex-api.js file")
        return 1
    except (ApiSyncError, OSError) as e:
        error(f"Error: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
