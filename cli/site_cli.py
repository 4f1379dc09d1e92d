"""Command-line tools: generate or deploy the site without the server."""

from __future__ import annotations

import argparse
import getpass
import sys
from typing import TYPE_CHECKING

from backend.config import Settings
from backend.exceptions import InternalServerError, SiteError
from backend.filesystem.document_store import SettingsStore, ThemeStore
from backend.filesystem.page_store import PageStore
from backend.services.auth_service import hash_password
from backend.services.deploy_service import Deployer
from backend.services.generator import SiteGenerator

if TYPE_CHECKING:
    from collections.abc import Sequence


def _settings_store(settings: Settings) -> SettingsStore:
    return SettingsStore(
        settings.config_dir,
        bootstrap_username=settings.admin_username,
        bootstrap_password=settings.admin_password,
    )


def cmd_generate(settings: Settings) -> int:
    generator = SiteGenerator(
        PageStore(settings.pages_dir),
        ThemeStore(settings.config_dir),
        settings.output_dir,
        templates_dir=settings.templates_dir,
    )
    count = generator.generate()
    print(f"Generated {count} pages.")
    return 0


def cmd_deploy(settings: Settings) -> int:
    deployer = Deployer(
        _settings_store(settings),
        settings.output_dir,
        settings.secret_key,
        timeout=settings.deploy_timeout_seconds,
    )
    files = deployer.deploy()
    print(f"Deployment complete: {files} files uploaded.")
    return 0


def cmd_hash_password() -> int:
    password = getpass.getpass("Password: ")
    if not password:
        print("Error: password must not be empty", file=sys.stderr)
        return 1
    if getpass.getpass("Confirm password: ") != password:
        print("Error: passwords do not match", file=sys.stderr)
        return 1
    print(hash_password(password))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pagewright", description="Pagewright site tools")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("generate", help="Render every page into the output directory")
    sub.add_parser("deploy", help="Upload the output directory over SFTP")
    sub.add_parser("hash-password", help="Print a bcrypt hash for a password")
    return parser


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "hash-password":
        return cmd_hash_password()

    if settings is None:
        settings = Settings()
    try:
        if args.command == "generate":
            return cmd_generate(settings)
        return cmd_deploy(settings)
    except (SiteError, InternalServerError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
