from __future__ import annotations

import logging
from argparse import ArgumentParser, Namespace
from typing import Sequence

from gpm_core.config import load_settings
from gpm_core.errors import ConfigError, GpmError, InvalidPackageIdentifier
from gpm_core.get import GetResult, PackageGetter
from gpm_core.install import InstallStatus
from gpm_core.packages import parse_package
from gpm_core.packages.parse import normalize_name, split_spec

logger = logging.getLogger(__name__)

_PREFIX = "[gpm:get]"

_FLAG_PROMPTS = {
    "download_only": "[INFO] You enabled download without installing.",
    "update": "[INFO] You enabled force update.",
}

GET_DESCRIPTION = """\
Get downloads and installs the packages named by the import paths.

This command works even if no version control tool (git, hg, ...) is
installed. Packages are written as <import path>[@<version>], where version
is 'trunk' (default), '<kind>:<id>' such as 'tag:v1.0', or a bare tag name.
A single package may also be followed by its version: gpm get <package> <version>.
"""


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="gpm", description="Package manager for import-path packages.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="download and install packages", description=GET_DESCRIPTION)
    get.add_argument("-d", "--download-only", action="store_true", help="download without installing package(s)")
    get.add_argument("-u", "--update", action="store_true", help="force to update package(s)")
    get.add_argument("--gopath", help="Install root (defaults to $GPM_PATH, then $GOPATH)")
    get.add_argument("--repos-dir", help="Archive cache root (defaults to ~/.gpm/repos)")
    get.add_argument(
        "packages",
        nargs="+",
        metavar="package",
        help="import path, optionally with @version; or one import path followed by its version",
    )
    get.set_defaults(handler=cmd_get)
    return parser


def _describe(result: GetResult) -> str:
    pkg = result.package
    if result.install is None:
        return f"{_PREFIX} downloaded {pkg} -> {result.archive_path}"
    if result.install.status is InstallStatus.ALREADY_INSTALLED:
        return f"{_PREFIX} already installed {pkg} -> {result.install.path}"
    return f"{_PREFIX} {result.install.status.value} {pkg} -> {result.install.path}"


def _requests(tokens: Sequence[str]) -> list[tuple[str, str | None]]:
    """Pair each package token with an explicit version, if one was given.

    ``<package> <version>`` is read as one request when the second token is
    not itself a package name.
    """
    if len(tokens) == 2 and "@" not in tokens[0]:
        try:
            normalize_name(split_spec(tokens[1])[0])
        except InvalidPackageIdentifier:
            return [(tokens[0], tokens[1])]
    return [(token, None) for token in tokens]


def cmd_get(args: Namespace) -> int:
    for flag, prompt in _FLAG_PROMPTS.items():
        if getattr(args, flag, False):
            print(prompt)

    try:
        settings = load_settings(install_root=args.gopath, repos_dir=args.repos_dir)
    except ConfigError as exc:
        print(f"{_PREFIX} [ERROR] {exc}")
        return 1

    getter = PackageGetter(settings, progress=print)
    failures = 0
    for spec, version in _requests(args.packages):
        try:
            pkg = parse_package(spec, version)
            result = getter.acquire(pkg, update=args.update, download_only=args.download_only)
        except GpmError as exc:
            logger.debug("get failed for %s", spec, exc_info=True)
            print(f"{_PREFIX} [ERROR] {exc}")
            failures += 1
            continue
        print(_describe(result))

    if failures:
        return 1
    print("done.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return args.handler(args)
