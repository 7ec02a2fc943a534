#!/usr/bin/env python3
"""
Copyright 2025 7th software Ltd.

Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance with the
License. You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software distributed under the License is distributed on an
"AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the License for the specific
language governing permissions and limitations under the License.

Console logging for the API sync tool. Progress chatter goes through `echo`, which only prints when verbosity has been
enabled with `set_verbosity`. Problems go through `warn` and `error`, which always write to stderr so that they are
visible even when the tool runs silently inside a build step.
"""

from __future__ import annotations

import sys


VERBOSE = False


def echo(*args, **kwargs):
    """
    Write messages to stdout if the verbosity level is enabled.

    Parameters:
    - `*args`: The message(s) to be printed.
    - `**kwargs`: Additional keyword arguments to pass to the `print` function.
    """

    if VERBOSE:
        kwargs["flush"] = True
        print(*args, **kwargs)


def _write_stderr(msg: str) -> None:
    sys.stderr.write(msg + "\n")
    sys.stderr.flush()


def warn(*args, **kwargs):
    """
    Write a warning to stderr, regardless of the verbosity level.

    Used for conditions that do not stop the run but usually mean the generated output is not what the caller wanted,
    e.g. an empty extraction result or a consumer file without the generated-block anchor.
    """

    _write_stderr("Warning: " + " ".join(str(a) for a in args))


def error(*args, **kwargs):
    """
    Writes an error message to stderr.

    Parameters:
    - `*args`: Variable number of arguments to be joined into a single error message string.
    - `**kwargs`: Not used.

    Notes:
    This function always writes to stderr, regardless of the current verbosity level.
    """

    _write_stderr(" ".join(str(a) for a in args))


def set_verbosity(state: bool):
    """
    Enable or disable program verbosity.

    Parameters:
    - `state`: Set verbosity state to enabled (`True`) or disabled (`False`).
    """

    global VERBOSE

    VERBOSE = state
