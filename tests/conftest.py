"""Test fixtures for repoprep."""

import subprocess

import pytest


def run_git(cwd, *args):
    """Run a git command, failing the test on error."""
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )


def ref_exists(cwd, ref):
    """Check for a ref without decoding git's output."""
    result = subprocess.run(
        ["git", "show-ref", "--verify", "--quiet", ref],
        cwd=cwd,
        capture_output=True,
    )
    return result.returncode == 0


def _configure_user(repo):
    run_git(repo, "config", "user.email", "test@test.com")
    run_git(repo, "config", "user.name", "Test")


@pytest.fixture
def upstream_repo(tmp_path):
    """Local git repo acting as the remote, with nested branch names."""
    repo = tmp_path / "upstream"
    repo.mkdir()
    run_git(repo, "init")
    _configure_user(repo)

    (repo / "file.txt").write_text("content")
    run_git(repo, "add", ".")
    run_git(repo, "commit", "-m", "init")
    run_git(repo, "branch", "-M", "main")

    for branch in ("foo/bar", "foobar", "feature"):
        run_git(repo, "branch", branch)

    return repo


@pytest.fixture
def checkout_repo(tmp_path, upstream_repo):
    """Clone of upstream_repo, the cached working copy to prepare."""
    repo = tmp_path / "checkout"
    subprocess.run(
        ["git", "clone", str(upstream_repo), str(repo)],
        check=True,
        capture_output=True,
    )
    _configure_user(repo)
    return repo


@pytest.fixture
def upstream_url(upstream_repo):
    """Fetch URL that clones of upstream_repo are configured with."""
    return str(upstream_repo)


@pytest.fixture
def sample_config():
    """Minimal valid config."""
    return {
        "version": 1,
        "repository": {
            "url": "https://example.com/org/repo.git",
            "path": "checkout",
        },
        "ref": "main",
    }
