"""Command line entry points: ``patch-artifact`` and ``apply-jar-patches``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import httpx

from jarpatch.factory import create_patch_applier, create_patcher
from jarpatch.logging_config import configure_logging
from jarpatch.modules.jarreplace.domain import (
    FetchFailed,
    InvalidCoordinate,
    MissingDependency,
    PatchOptions,
    PatchRequest,
)
from jarpatch.modules.jarreplace.filereplace import OpenFileChecker
from jarpatch.settings import Settings, get_settings

log = logging.getLogger(__name__)

PATCH_EPILOG = """\
examples:
  # single directory
  patch-artifact net.minidev json-smart 2.4.3 2.5.2 /opt/sonarqube/lib

  # several directories in one argument
  patch-artifact net.minidev json-smart 2.4.3 2.5.2 "/opt/sonarqube/lib /opt/sonarqube/extensions/plugins"

  # keep a backup of the replaced jar
  patch-artifact --backup io.netty netty-handler 4.1.100.Final 4.1.123.Final

  # use a mirror
  patch-artifact -r https://maven.aliyun.com/repository/central net.minidev json-smart 2.4.3 2.5.2
"""


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on bad input; this tool reports every validation error as 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_patch_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="patch-artifact",
        description=(
            "Find jar files of a given version, download the new version from a Maven "
            "repository once, place it next to every old jar and delete the old jar."
        ),
        epilog=PATCH_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("group", help="Maven group ID (e.g. net.minidev)")
    parser.add_argument("artifact", help="Maven artifact ID (e.g. json-smart)")
    parser.add_argument("old_version", metavar="old-version", help="current version (e.g. 2.4.3)")
    parser.add_argument("new_version", metavar="new-version", help="new version (e.g. 2.5.2)")
    parser.add_argument(
        "target_dirs",
        metavar="target-directory-list",
        nargs="?",
        default=None,
        help=f"space separated directories in one argument (default: {settings.default_target_dir})",
    )
    parser.add_argument(
        "-r",
        "--repository",
        default=settings.repository_url,
        help=f"Maven repository URL (default: {settings.repository_url})",
    )
    _add_common_flags(parser)
    parser.add_argument("--checksum", action="store_true", help="verify the sha1 of the downloaded jar (advisory)")
    return parser


def build_apply_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="apply-jar-patches",
        description="Apply jar patches to replace vulnerable jar files in a target directory.",
    )
    parser.add_argument("patches_dir", metavar="patches-directory", help="directory containing jar patch files")
    parser.add_argument(
        "target_dir",
        metavar="target-directory",
        nargs="?",
        default=settings.default_patch_target_dir,
        help=f"directory to search for jar files (default: {settings.default_patch_target_dir})",
    )
    _add_common_flags(parser)
    return parser


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-d", "--dry-run", action="store_true", help="only show the operations to be performed")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    parser.add_argument("-f", "--force", action="store_true", help="replace files even if they are in use")
    parser.add_argument("--backup", action="store_true", help="back up old files to a backup directory")


def split_target_dirs(raw: Optional[str], default: str) -> List[str]:
    return (raw if raw is not None else default).split()


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
    checker: Optional[OpenFileChecker] = None,
) -> int:
    settings = settings or get_settings()
    args = build_patch_parser(settings).parse_args(argv)
    configure_logging(settings.log_level, verbose=args.verbose)

    options = PatchOptions(
        dry_run=args.dry_run,
        verbose=args.verbose,
        force=args.force,
        backup=args.backup,
        verify_checksum=args.checksum,
    )
    try:
        request = PatchRequest.create(
            group=args.group,
            artifact=args.artifact,
            old_version=args.old_version,
            new_version=args.new_version,
            search_dirs=split_target_dirs(args.target_dirs, settings.default_target_dir),
            repository_url=args.repository,
            options=options,
        )
    except InvalidCoordinate as exc:
        log.error("Invalid arguments: %s", exc)
        return 1

    patcher = create_patcher(settings, client=client, checker=checker)
    try:
        report = patcher.run(request)
    except MissingDependency as exc:
        log.error("Missing required capability: %s", exc)
        return 1
    except FetchFailed as exc:
        log.error("Failed to download new version jar file, operation terminated: %s", exc)
        return 1
    except InvalidCoordinate as exc:
        log.error("Invalid arguments: %s", exc)
        return 1
    finally:
        patcher.downloader.close()
    return report.exit_code


def apply_patches_main(
    argv: Optional[Sequence[str]] = None,
    *,
    settings: Optional[Settings] = None,
    checker: Optional[OpenFileChecker] = None,
) -> int:
    settings = settings or get_settings()
    args = build_apply_parser(settings).parse_args(argv)
    configure_logging(settings.log_level, verbose=args.verbose)

    options = PatchOptions(
        dry_run=args.dry_run,
        verbose=args.verbose,
        force=args.force,
        backup=args.backup,
    )
    applier = create_patch_applier(settings, checker=checker)
    try:
        report = applier.apply(Path(args.patches_dir), Path(args.target_dir), options)
    except InvalidCoordinate as exc:
        log.error("Error: %s", exc)
        return 1
    except MissingDependency as exc:
        log.error("Missing required capability: %s", exc)
        return 1
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
