"""Command-line interface."""

import argparse
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import ConfigError, find_config, load_config
from .git import GitCommandManager
from .output import Output, set_output
from .prepare import (
    IdentityError,
    RecreateDirectoryError,
    prepare_existing_directory,
    recreate_directory,
    validate_identity,
)
from .validation import ValidationError, validate_repository_path, validate_repository_url


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error, 2 if the directory must be
        recreated).
    """
    parser = argparse.ArgumentParser(
        prog="repoprep",
        description="Prepare a cached git checkout for reuse",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Global flags
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress informational output",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show git commands and diagnostics",
    )

    subparsers = parser.add_subparsers(dest="command")

    # prepare command
    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Reset an existing checkout so any ref can be checked out",
    )
    _add_repository_arguments(prepare_parser)
    prepare_parser.add_argument(
        "--ref",
        help="Ref that will be checked out next",
    )
    prepare_parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Remove untracked files and reset tracked files (default: on)",
    )
    prepare_parser.add_argument(
        "--remote",
        help="Remote name (default: origin)",
    )
    prepare_parser.add_argument(
        "--remove-on-failure",
        action="store_true",
        default=None,
        help="Delete the directory contents if it cannot be prepared",
    )

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check that a directory is a clone of the expected repository",
    )
    _add_repository_arguments(check_parser)
    check_parser.add_argument(
        "--remote",
        help="Remote name (default: origin)",
    )

    args = parser.parse_args(argv)

    # Set up output handler
    output = Output(no_color=args.no_color, quiet=args.quiet, verbose=args.verbose)
    set_output(output)

    if args.command is None:
        parser.print_help()
        return 0

    # Route to command handler
    handlers = {
        "prepare": lambda: cmd_prepare(args, output),
        "check": lambda: cmd_check(args, output),
    }

    handler = handlers.get(args.command)
    if handler:
        return handler()

    return 0


def _add_repository_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the arguments shared by all commands."""
    parser.add_argument(
        "path",
        nargs="?",
        help="Working copy directory (default: repository.path or cwd)",
    )
    parser.add_argument(
        "--url",
        help="Expected fetch URL of the remote",
    )
    parser.add_argument(
        "--config", "-c",
        help="Config file (default: search for .repoprep.yaml upward)",
    )


def _load_settings(args, output: Output) -> dict[str, Any] | None:
    """Merge config file values with command-line arguments.

    Command-line arguments win over the config file.

    Args:
        args: Parsed arguments
        output: Output handler

    Returns:
        Settings dict, or None on error
    """
    config: dict[str, Any] = {}
    config_dir = Path.cwd()

    if args.config:
        config_path = Path(args.config)
    else:
        try:
            config_path = find_config()
        except ConfigError:
            config_path = None

    if config_path is not None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            output.error(str(e))
            return None
        config_dir = config_path.resolve().parent
        output.debug(f"Using config {config_path}")

    repository = config.get("repository", {})

    if args.path:
        path = Path(args.path)
    elif "path" in repository:
        path = config_dir / repository["path"]
    else:
        path = Path.cwd()

    url = args.url or repository.get("url")
    if not url:
        output.error("No repository URL given. Use --url or set repository.url in .repoprep.yaml")
        return None

    def pick(name: str, default: Any) -> Any:
        value = getattr(args, name, None)
        if value is not None:
            return value
        return config.get(name, default)

    return {
        "path": path.resolve(),
        "url": url,
        "remote": getattr(args, "remote", None) or repository.get("remote", "origin"),
        "ref": pick("ref", ""),
        "clean": pick("clean", True),
        "remove_on_failure": pick("remove_on_failure", False),
    }


def cmd_prepare(args, output: Output) -> int:
    """Execute the prepare command."""
    settings = _load_settings(args, output)
    if settings is None:
        return 1
    path = settings["path"]

    git = GitCommandManager(path, remote=settings["remote"], output=output)
    try:
        prepare_existing_directory(
            git,
            path,
            settings["url"],
            clean=settings["clean"],
            ref=settings["ref"],
            output=output,
        )
    except (ValidationError, IdentityError) as e:
        output.error(str(e))
        return 1
    except RecreateDirectoryError as e:
        output.warning(str(e.reason))
        output.error(str(e))
        if settings["remove_on_failure"]:
            try:
                recreate_directory(path, output)
            except OSError as err:
                output.error(f"Unable to delete the contents of '{path}': {err}")
                return 1
        return 2

    output.success(f"Repository at {output.path(str(path))} is ready for checkout.")
    return 0


def cmd_check(args, output: Output) -> int:
    """Execute the check command."""
    settings = _load_settings(args, output)
    if settings is None:
        return 1
    path = settings["path"]

    git = GitCommandManager(path, remote=settings["remote"], output=output)
    try:
        validate_repository_path(path)
        validate_repository_url(settings["url"])
        validate_identity(git, path, settings["url"])
    except (ValidationError, IdentityError) as e:
        output.error(str(e))
        return 1

    output.success(f"Repository at {output.path(str(path))} matches {settings['url']}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
