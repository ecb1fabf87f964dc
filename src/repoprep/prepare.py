"""Preparation of an existing working copy for reuse.

A cached checkout is reused only if it is a git repository whose origin
matches the expected URL. It is then brought into a state where any ref can
be fetched and checked out: stale locks removed, HEAD detached, local
branches and colliding remote-tracking branches deleted, submodules
verified and, optionally, the working tree cleaned.

Identity failures leave the directory untouched. Every later failure is
reported as :class:`RecreateDirectoryError`; the caller is expected to
discard the directory and clone again rather than retry in place.
"""

from pathlib import Path

from . import fs
from .git import GitCommandManager, GitError
from .output import Output, get_output
from .refs import find_conflicting_branches
from .validation import validate_inputs

# Left behind by a cancelled run or crashed git process
LOCK_FILES = (
    Path(".git") / "index.lock",
    Path(".git") / "shallow.lock",
)

_FAILURE_CAUSES = (
    "This might be caused by: 1) path too long, 2) permission issue, "
    "or 3) file in use."
)


class PrepareError(Exception):
    """Base class for directory preparation failures."""
    pass


class IdentityError(PrepareError):
    """Raised when the directory is not the expected repository."""
    pass


class NotAGitDirectoryError(IdentityError):
    """Raised when the directory has no .git directory."""

    def __init__(self, repository_path: Path):
        self.repository_path = repository_path
        super().__init__(
            f"The directory '{repository_path}' is not a git repository. "
            "Please remove the directory and try again."
        )


class UrlMismatchError(IdentityError):
    """Raised when the fetch URL differs from the expected URL."""

    def __init__(self, repository_path: Path, expected_url: str, actual_url: str | None):
        self.repository_path = repository_path
        self.expected_url = expected_url
        self.actual_url = actual_url
        super().__init__(
            f"The repository at '{repository_path}' does not match the expected "
            f"URL '{expected_url}'. Please remove the directory and try again."
        )


class DetachFailedError(PrepareError):
    """Raised when HEAD cannot be detached."""
    pass


class BranchDeleteError(PrepareError):
    """Raised when a branch cannot be deleted."""
    pass


class CorruptSubmodulesError(PrepareError):
    """Raised when submodule status cannot be determined."""
    pass


class CleanFailedError(PrepareError):
    """Raised when removing untracked files fails."""
    pass


class ResetFailedError(PrepareError):
    """Raised when resetting tracked files fails."""
    pass


class RecreateDirectoryError(PrepareError):
    """Raised when the directory must be discarded and cloned again.

    The failing step's exception is available as ``reason`` (and as
    ``__cause__``).
    """

    def __init__(self, repository_path: Path, reason: Exception):
        self.repository_path = repository_path
        self.reason = reason
        super().__init__(
            f"Unable to prepare the existing repository at '{repository_path}'. "
            "The repository will be recreated instead."
        )


def validate_identity(
    git: GitCommandManager,
    repository_path: Path,
    repository_url: str,
) -> None:
    """Check that the directory is a clone of the expected repository.

    Read-only.

    Args:
        git: Command manager for the directory
        repository_path: Path to the working copy
        repository_url: Expected fetch URL

    Raises:
        NotAGitDirectoryError: If there is no .git directory.
        UrlMismatchError: If the fetch URL is missing or different.
    """
    if not fs.directory_exists(repository_path / ".git"):
        raise NotAGitDirectoryError(repository_path)

    fetch_url = git.try_get_fetch_url()
    if fetch_url != repository_url:
        raise UrlMismatchError(repository_path, repository_url, fetch_url)


def remove_lock_files(repository_path: Path, output: Output | None = None) -> None:
    """Delete stale lock files, ignoring failures.

    A lock that cannot be removed is only reported as a debug message; if
    it matters, a later git command fails on it.

    Args:
        repository_path: Path to the working copy
        output: Output handler
    """
    if output is None:
        output = get_output()

    for lock_file in LOCK_FILES:
        lock_path = repository_path / lock_file
        try:
            fs.remove_recursive(lock_path)
        except OSError as e:
            output.debug(f"Unable to delete '{lock_path}'. {e}")


def ensure_detached(git: GitCommandManager) -> None:
    """Detach HEAD unless it already is.

    Args:
        git: Command manager for the directory

    Raises:
        DetachFailedError: If checkout --detach fails.
    """
    if git.is_detached():
        return

    try:
        git.checkout_detach()
    except GitError as e:
        raise DetachFailedError(f"Unable to detach HEAD: {e}") from e


def _delete_branch(git: GitCommandManager, remote: bool, branch: str) -> None:
    try:
        git.branch_delete(remote, branch)
    except GitError as e:
        raise BranchDeleteError(f"Unable to delete branch '{branch}': {e}") from e


def remove_conflicting_branches(
    git: GitCommandManager,
    ref: str,
    output: Output | None = None,
) -> None:
    """Delete all local branches and remote-tracking branches colliding with ref.

    Example: for ref ``refs/heads/foo``, a previously fetched
    ``origin/foo/bar`` is deleted; for ``refs/heads/foo/bar``, ``origin/foo``
    is. ``origin/foobar`` survives either way.

    Args:
        git: Command manager for the directory. HEAD must be detached.
        ref: Desired ref, bare or fully qualified. Empty skips the
            remote-tracking branch check.
        output: Output handler

    Raises:
        BranchDeleteError: If a branch cannot be deleted.
        GitError: If branches cannot be listed.
    """
    if output is None:
        output = get_output()

    for branch in git.branch_list(False):
        output.debug(f"Deleting local branch {branch}")
        _delete_branch(git, False, branch)

    if not ref:
        return

    remote_branches = git.branch_list(True)
    for branch in find_conflicting_branches(ref, remote_branches, git.remote):
        output.info(f"Deleting remote-tracking branch {branch} (conflicts with {ref})")
        _delete_branch(git, True, branch)


def verify_and_clean(
    git: GitCommandManager,
    repository_path: Path,
    clean: bool,
    output: Output | None = None,
) -> None:
    """Verify submodules, then optionally clean and reset the working tree.

    Args:
        git: Command manager for the directory
        repository_path: Path to the working copy
        clean: Remove untracked files and reset tracked files to HEAD
        output: Output handler

    Raises:
        CorruptSubmodulesError: If submodule status fails.
        CleanFailedError: If git clean fails.
        ResetFailedError: If git reset fails. Not attempted if clean failed.
    """
    if output is None:
        output = get_output()

    if not git.submodule_status():
        raise CorruptSubmodulesError(f"Bad submodules found in '{repository_path}'")

    if not clean:
        return

    with output.group("Cleaning the repository"):
        if not git.try_clean():
            raise CleanFailedError(
                f"The clean command failed. {_FAILURE_CAUSES} For further "
                "investigation, manually run 'git clean -ffdx' on the "
                f"directory '{repository_path}'."
            )
        if not git.try_reset():
            raise ResetFailedError(
                f"The reset command failed. {_FAILURE_CAUSES} For further "
                "investigation, manually run 'git reset --hard HEAD' on the "
                f"directory '{repository_path}'."
            )


def prepare_existing_directory(
    git: GitCommandManager,
    repository_path: Path | str,
    repository_url: str,
    *,
    clean: bool,
    ref: str,
    output: Output | None = None,
) -> None:
    """Prepare an existing working copy for checking out ref.

    Args:
        git: Command manager for the directory
        repository_path: Path to the working copy
        repository_url: Expected fetch URL of the remote
        clean: Remove untracked files and reset tracked files to HEAD
        ref: Ref that will be checked out next (may be empty)
        output: Output handler

    Raises:
        ValidationError: If an argument is empty or malformed.
        PrepareError: If no command manager is given.
        NotAGitDirectoryError: If the directory is not a repository.
        UrlMismatchError: If the repository has a different remote URL.
        RecreateDirectoryError: If any cleanup step fails.
    """
    if output is None:
        output = get_output()

    validate_inputs(repository_path, repository_url, ref)
    if git is None:
        raise PrepareError(
            "Git command manager is not defined. Cannot prepare existing directory."
        )

    repository_path = Path(repository_path)
    validate_identity(git, repository_path, repository_url)
    remove_lock_files(repository_path, output)

    try:
        with output.group("Removing previously created refs, to avoid conflicts"):
            ensure_detached(git)
            remove_conflicting_branches(git, ref, output)

        verify_and_clean(git, repository_path, clean, output)
    except (PrepareError, GitError, OSError) as e:
        output.debug(str(e))
        raise RecreateDirectoryError(repository_path, e) from e


def recreate_directory(repository_path: Path | str, output: Output | None = None) -> None:
    """Empty a directory that could not be prepared so it can be cloned into.

    Args:
        repository_path: Path to the working copy
        output: Output handler

    Raises:
        OSError: If an entry cannot be removed.
    """
    if output is None:
        output = get_output()

    repository_path = Path(repository_path)
    if not fs.directory_exists(repository_path):
        return

    output.info(f"Deleting the contents of {output.path(str(repository_path))}")
    for name in fs.empty_directory(repository_path):
        output.removed(name)
