"""Ref name handling and branch conflict detection.

Refs form a directory hierarchy: ``foo`` and ``foo/bar`` cannot exist side
by side. Before checking out or fetching a branch, any previously fetched
remote-tracking branch that sits on an ancestor or descendant path of it
has to go.
"""

HEADS_PREFIX = "refs/heads/"
REFS_PREFIX = "refs/"


def normalize_ref(ref: str) -> str:
    """Qualify a bare branch name.

    Args:
        ref: Branch name or full ref

    Returns:
        The ref unchanged if it starts with ``refs/``, otherwise
        ``refs/heads/<ref>``.
    """
    if ref.startswith(REFS_PREFIX):
        return ref
    return f"{HEADS_PREFIX}{ref}"


def is_heads_ref(ref: str) -> bool:
    """Check if a full ref names a local branch."""
    return ref.startswith(HEADS_PREFIX)


def strip_remote_prefix(branch: str, remote: str = "origin") -> str:
    """Strip the remote name from a remote-tracking branch.

    Args:
        branch: Remote-tracking branch, e.g. ``origin/foo/bar``
        remote: Remote name

    Returns:
        The branch name relative to the remote, e.g. ``foo/bar``
    """
    prefix = f"{remote}/"
    if branch.startswith(prefix):
        return branch[len(prefix):]
    return branch


def refs_conflict(target: str, candidate: str) -> bool:
    """Check if two branch names would collide in the ref hierarchy.

    Comparison is case-insensitive, matching case-insensitive filesystems
    where loose refs are stored as files.

    Args:
        target: Branch name being checked out, without ``refs/heads/``
        candidate: Existing branch name, without the remote prefix

    Returns:
        True if either name is a path-segment prefix of the other.
    """
    target = target.upper()
    candidate = candidate.upper()
    return target.startswith(f"{candidate}/") or candidate.startswith(f"{target}/")


def find_conflicting_branches(
    ref: str,
    remote_branches: list[str],
    remote: str = "origin",
) -> list[str]:
    """Select remote-tracking branches that collide with a ref.

    Args:
        ref: Desired ref, bare or fully qualified. Empty means no ref.
        remote_branches: Remote-tracking branch names, e.g. ``origin/foo``
        remote: Remote name the branches belong to

    Returns:
        Conflicting branches, in the order given. Always empty when ref is
        empty or outside ``refs/heads/``.
    """
    if not ref:
        return []

    ref = normalize_ref(ref)
    if not is_heads_ref(ref):
        return []

    target = ref[len(HEADS_PREFIX):]
    return [
        branch
        for branch in remote_branches
        if refs_conflict(target, strip_remote_prefix(branch, remote))
    ]
