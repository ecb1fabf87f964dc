"""Console output for repoprep.

Messages go to stdout, warnings and errors to stderr. When running under
GitHub Actions, groups and debug lines use the runner's workflow commands
so the log can be folded.
"""

import os
import sys
from contextlib import contextmanager
from typing import Iterator, TextIO

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"


def _printable(text: str) -> str:
    # Names read from git may carry surrogate escapes for non-UTF-8 bytes
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


class Output:
    """Prints progress, diagnostics and log groups for a single run."""

    def __init__(
        self,
        *,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        ci_groups: bool | None = None,
        stream: TextIO | None = None,
        err_stream: TextIO | None = None,
    ):
        """Initialize output handler.

        Args:
            no_color: Disable colored output
            quiet: Suppress progress output; warnings and errors still print
            verbose: Print debug messages (also enabled by RUNNER_DEBUG=1)
            ci_groups: Emit GitHub Actions workflow commands (default: true
                when GITHUB_ACTIONS is "true")
            stream: Progress stream (default stdout)
            err_stream: Warning and error stream (default stderr)
        """
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr
        self.quiet = quiet
        self.verbose = verbose or os.environ.get("RUNNER_DEBUG") == "1"
        if ci_groups is None:
            ci_groups = os.environ.get("GITHUB_ACTIONS") == "true"
        self.ci_groups = ci_groups
        self._group_depth = 0

        isatty = getattr(self.stream, "isatty", None)
        self._use_color = (
            not no_color
            and not os.environ.get("NO_COLOR")
            and isatty is not None
            and isatty()
        )

    def _colorize(self, text: str, *codes: str) -> str:
        if not self._use_color or not codes:
            return text
        return f"{''.join(codes)}{text}{RESET}"

    def _emit(self, text: str, *codes: str, err: bool = False, always: bool = False) -> None:
        if self.quiet and not (err or always):
            return
        stream = self.err_stream if err else self.stream
        print(self._colorize(_printable(text), *codes), file=stream)

    def success(self, message: str) -> None:
        self._emit(message, GREEN)

    def info(self, message: str) -> None:
        self._emit(message)

    def header(self, text: str) -> None:
        self._emit(text, BOLD)

    def warning(self, message: str) -> None:
        self._emit(f"Warning: {message}", YELLOW, err=True)

    def error(self, message: str) -> None:
        self._emit(f"Error: {message}", RED, err=True)

    def debug(self, message: str) -> None:
        """Print a diagnostic line when verbose.

        In CI the line becomes a ``::debug::`` command, which the runner
        only shows when step debugging is enabled.
        """
        if not self.verbose:
            return
        if self.ci_groups:
            self._emit(f"::debug::{message}", always=True)
        else:
            self._emit(f"[debug] {message}", DIM, always=True)

    def path(self, path: str) -> str:
        """Return path highlighted for inclusion in a message."""
        return self._colorize(path, CYAN)

    def removed(self, name: str) -> None:
        self._emit(f"  {self._colorize('-', RED)} {self.path(name)}")

    @contextmanager
    def group(self, label: str) -> Iterator[None]:
        """Group the output produced inside the block.

        The group is always closed, including when the block raises.
        Groups do not nest; markers are only emitted for the outermost one.

        Args:
            label: Group title
        """
        outermost = self._group_depth == 0
        self._group_depth += 1
        if outermost:
            if self.ci_groups:
                self._emit(f"::group::{label}", always=True)
            else:
                self.header(label)
        try:
            yield
        finally:
            self._group_depth -= 1
            if outermost and self.ci_groups:
                self._emit("::endgroup::", always=True)


_default_output: Output | None = None


def get_output() -> Output:
    """Return the process-wide Output, creating one on first use."""
    global _default_output
    if _default_output is None:
        _default_output = Output()
    return _default_output


def set_output(output: Output) -> None:
    """Replace the process-wide Output."""
    global _default_output
    _default_output = output
