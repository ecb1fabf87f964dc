"""Argument validation for repoprep."""

from pathlib import Path


class ValidationError(Exception):
    """Raised when argument validation fails."""
    pass


def validate_repository_path(repository_path: Path | str | None) -> None:
    """Validate the working copy path.

    Args:
        repository_path: Path to validate

    Raises:
        ValidationError: If path is empty
    """
    if repository_path is None or not str(repository_path).strip():
        raise ValidationError("Expected repository path to be defined")


def validate_repository_url(repository_url: str | None) -> None:
    """Validate the expected remote URL.

    Args:
        repository_url: URL to validate

    Raises:
        ValidationError: If URL is empty
    """
    if not repository_url or not repository_url.strip():
        raise ValidationError("Expected repository URL to be defined")


# Characters git refuses anywhere in a ref name, besides control characters
FORBIDDEN_REF_CHARS = " ~^:?*[\\"


def validate_ref(ref: str) -> None:
    """Validate a ref name for use in branch conflict checks.

    Applies the rules of ``git check-ref-format``, so only names git itself
    can never store are rejected. Bare branch names are allowed because
    they are qualified under ``refs/heads/`` later.

    Args:
        ref: Ref to validate (empty is allowed)

    Raises:
        ValidationError: If ref is malformed
    """
    if not ref:
        return

    if ref == "@":
        raise ValidationError("Ref cannot be '@'")

    for c in ref:
        if ord(c) < 0x20 or ord(c) == 0x7F:
            raise ValidationError(f"Ref cannot contain control characters: {ref!r}")
        if c in FORBIDDEN_REF_CHARS:
            raise ValidationError(f"Ref cannot contain '{c}': {ref}")

    if ".." in ref:
        raise ValidationError(f"Ref cannot contain '..': {ref}")

    if "@{" in ref:
        raise ValidationError(f"Ref cannot contain '@{{': {ref}")

    if ref.startswith("/") or ref.endswith("/") or "//" in ref:
        raise ValidationError(f"Ref has an empty path segment: {ref}")

    if ref.endswith("."):
        raise ValidationError(f"Ref cannot end with '.': {ref}")

    for component in ref.split("/"):
        if component.startswith("."):
            raise ValidationError(f"Ref path segment cannot start with '.': {ref}")
        if component.endswith(".lock"):
            raise ValidationError(f"Ref path segment cannot end with '.lock': {ref}")


def validate_inputs(
    repository_path: Path | str | None,
    repository_url: str | None,
    ref: str,
) -> None:
    """Validate all inputs for preparing a directory.

    Args:
        repository_path: Path to the working copy
        repository_url: Expected remote URL
        ref: Desired ref

    Raises:
        ValidationError: If any validation fails
    """
    validate_repository_path(repository_path)
    validate_repository_url(repository_url)
    validate_ref(ref)
