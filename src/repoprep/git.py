"""Git command wrapper."""

import subprocess
from pathlib import Path

from .output import Output, get_output


class GitError(Exception):
    """Raised when git command fails."""
    pass


class GitCommandManager:
    """Runs git commands against a single working copy.

    Methods named ``try_*`` report failure through their return value;
    the others raise :class:`GitError`.
    """

    def __init__(
        self,
        repo_dir: Path,
        *,
        remote: str = "origin",
        output: Output | None = None,
    ):
        """Initialize the command manager.

        Args:
            repo_dir: Path to the working copy.
            remote: Name of the remote whose branches are tracked.
            output: Output handler for command diagnostics.
        """
        self.repo_dir = Path(repo_dir)
        self.remote = remote
        self.output = output or get_output()

    def run(self, args: list[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command in the working copy.

        Args:
            args: Git command arguments (without 'git' prefix)
            check: Raise GitError on a non-zero exit code

        Returns:
            CompletedProcess result, with output decoded as UTF-8 and any
            invalid bytes kept as surrogate escapes

        Raises:
            GitError: If the command fails and check is True, or git
                cannot be started at all.
        """
        self.output.debug(f"git {' '.join(args)}")
        # Ref names are bytes to git; undecodable bytes round-trip through
        # surrogates so they can be passed back as arguments unchanged.
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_dir,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
            )
        except OSError as e:
            raise GitError(f"Unable to run git: {e}") from e

        if check and result.returncode != 0:
            raise GitError(result.stderr.strip() or f"Git command failed: {' '.join(args)}")
        return result

    def try_get_fetch_url(self) -> str | None:
        """Get the configured fetch URL of the remote.

        Returns:
            The URL, or None if the remote is not configured.
        """
        result = self.run(
            ["config", "--local", "--get", f"remote.{self.remote}.url"],
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def is_detached(self) -> bool:
        """Check whether HEAD is detached.

        An unborn or unresolvable HEAD counts as detached, since there is
        no checked-out branch that would block deletion.

        Returns:
            True unless HEAD points at a local branch.
        """
        result = self.run(
            ["rev-parse", "--symbolic-full-name", "--verify", "--quiet", "HEAD"],
            check=False,
        )
        return not result.stdout.strip().startswith("refs/heads/")

    def checkout_detach(self) -> None:
        """Detach HEAD at the current commit.

        Raises:
            GitError: If checkout fails.
        """
        self.run(["checkout", "--detach"])

    def branch_list(self, remote: bool) -> list[str]:
        """List local or remote-tracking branches.

        Args:
            remote: List remote-tracking branches of the configured remote
                instead of local branches.

        Returns:
            Short branch names in git's order, without duplicates.
            Remote-tracking names keep their remote prefix, e.g.
            ``origin/main``.

        Raises:
            GitError: If listing fails.
        """
        args = ["rev-parse", "--symbolic-full-name"]
        if remote:
            args.append(f"--remotes={self.remote}")
            prefix = "refs/remotes/"
        else:
            args.append("--branches")
            prefix = "refs/heads/"

        result = self.run(args)

        branches = []
        for line in result.stdout.split("\n"):
            line = line.strip()
            if not line:
                continue
            if line.startswith(prefix):
                line = line[len(prefix):]
            # A symbolic ref such as origin/HEAD resolves to its target
            if line not in branches:
                branches.append(line)
        return branches

    def branch_delete(self, remote: bool, branch: str) -> None:
        """Force-delete a branch.

        Args:
            remote: The branch is a remote-tracking branch.
            branch: Short branch name as returned by branch_list.

        Raises:
            GitError: If deletion fails.
        """
        args = ["branch", "--delete", "--force"]
        if remote:
            args.append("--remote")
        args.append(branch)
        self.run(args)

    def submodule_status(self) -> bool:
        """Check that submodule state can be read.

        Returns:
            True if ``git submodule status`` succeeds.
        """
        result = self.run(["submodule", "status"], check=False)
        if result.stdout.strip():
            self.output.debug(result.stdout.rstrip())
        return result.returncode == 0

    def try_clean(self) -> bool:
        """Remove untracked and ignored files and directories.

        Returns:
            True if clean succeeded.
        """
        return self.run(["clean", "-ffdx"], check=False).returncode == 0

    def try_reset(self) -> bool:
        """Reset tracked files to HEAD.

        Returns:
            True if reset succeeded.
        """
        return self.run(["reset", "--hard", "HEAD"], check=False).returncode == 0
