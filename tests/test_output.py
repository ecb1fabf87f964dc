"""Tests for output module."""

import io

import pytest

from repoprep.output import Output, get_output, set_output


def _output(**kwargs):
    kwargs.setdefault("stream", io.StringIO())
    kwargs.setdefault("err_stream", io.StringIO())
    return Output(**kwargs)


class TestMessages:
    """Tests for message levels."""

    def test_info_and_quiet(self):
        """Info is suppressed by quiet."""
        out = _output()
        out.info("hello")
        assert out.stream.getvalue() == "hello\n"

        quiet = _output(quiet=True)
        quiet.info("hello")
        assert quiet.stream.getvalue() == ""

    def test_errors_go_to_err_stream(self):
        """Warnings and errors are printed even when quiet."""
        out = _output(quiet=True)
        out.warning("careful")
        out.error("broken")
        assert out.err_stream.getvalue() == "Warning: careful\nError: broken\n"

    def test_debug_hidden_by_default(self, monkeypatch):
        """Debug needs verbose."""
        monkeypatch.delenv("RUNNER_DEBUG", raising=False)
        out = _output(ci_groups=False)
        out.debug("details")
        assert out.stream.getvalue() == ""

    def test_debug_verbose(self):
        """Verbose prints debug messages."""
        out = _output(verbose=True, ci_groups=False)
        out.debug("details")
        assert "[debug] details" in out.stream.getvalue()

    def test_debug_runner_debug(self, monkeypatch):
        """RUNNER_DEBUG=1 enables debug output in CI format."""
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        out = _output(ci_groups=True)
        out.debug("details")
        assert out.stream.getvalue() == "::debug::details\n"

    def test_quiet_keeps_debug_and_markers(self):
        """Quiet hides progress but not verbose diagnostics or group markers."""
        out = _output(quiet=True, verbose=True, ci_groups=True)
        with out.group("Cleaning"):
            out.info("inside")
            out.removed("file.txt")
            out.debug("details")
        assert out.stream.getvalue() == (
            "::group::Cleaning\n::debug::details\n::endgroup::\n"
        )

    def test_undecodable_name_is_escaped(self):
        """Names read from git with invalid UTF-8 print as escapes."""
        out = _output()
        out.info("Deleting origin/bad\udcff")
        assert out.stream.getvalue() == "Deleting origin/bad\\udcff\n"

    def test_no_color_for_non_tty(self):
        """StringIO is not a TTY, so no escape codes."""
        out = _output()
        out.success("done")
        assert "\033[" not in out.stream.getvalue()


class TestGroup:
    """Tests for Output.group."""

    def test_ci_markers(self):
        """Groups print GitHub Actions markers."""
        out = _output(ci_groups=True)
        with out.group("Cleaning"):
            out.info("inside")
        assert out.stream.getvalue() == "::group::Cleaning\ninside\n::endgroup::\n"

    def test_closed_on_exception(self):
        """Group is closed when the block raises."""
        out = _output(ci_groups=True)
        with pytest.raises(RuntimeError):
            with out.group("Failing"):
                raise RuntimeError("boom")
        assert out.stream.getvalue().endswith("::endgroup::\n")

    def test_nested_groups_flattened(self):
        """Inner groups emit no markers."""
        out = _output(ci_groups=True)
        with out.group("Outer"):
            with out.group("Inner"):
                pass
        assert out.stream.getvalue() == "::group::Outer\n::endgroup::\n"

    def test_header_outside_ci(self):
        """Outside CI the label is printed as a header."""
        out = _output(ci_groups=False)
        with out.group("Cleaning"):
            pass
        assert out.stream.getvalue() == "Cleaning\n"

    def test_detect_github_actions(self, monkeypatch):
        """GITHUB_ACTIONS=true turns on markers."""
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        assert _output().ci_groups

        monkeypatch.delenv("GITHUB_ACTIONS")
        assert not _output().ci_groups


class TestDefaultOutput:
    """Tests for get_output and set_output."""

    def test_set_and_get(self):
        """set_output replaces the default instance."""
        previous = get_output()
        out = _output()
        try:
            set_output(out)
            assert get_output() is out
        finally:
            set_output(previous)
