"""provider_cli entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from db_user_provider.application.services.credential_service import CredentialService
from db_user_provider.application.services.user_provider_service import UserProviderService
from db_user_provider.config.settings import Settings, load_settings
from db_user_provider.infrastructure.db.connection_source import (
    SqlAlchemyConnectionSource,
    create_connection_source,
)
from db_user_provider.infrastructure.db.paging import paging_dialect_for
from db_user_provider.infrastructure.db.query_executor import QueryExecutor
from db_user_provider.infrastructure.db.user_repository import SqlQueryUserRepository
from db_user_provider.infrastructure.logging import configure_logging
from db_user_provider.infrastructure.security.password_hasher import create_password_hasher

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True)
class ProviderRuntime:
    """Wired provider services sharing one connection source."""

    settings: Settings
    connection_source: SqlAlchemyConnectionSource
    provider: UserProviderService


def build_provider_runtime(
    *,
    settings: Settings,
    connection_source: SqlAlchemyConnectionSource | None = None,
) -> ProviderRuntime:
    """Build provider services from settings."""

    queries = settings.query_configurations()
    source = connection_source
    if source is None:
        source = create_connection_source(settings)
    executor = QueryExecutor(
        connection_source=source,
        paging_dialect=paging_dialect_for(queries.rdbms),
    )
    users = SqlQueryUserRepository(executor, queries)
    credentials = CredentialService(
        users=users,
        password_hasher=create_password_hasher(queries.hash_scheme),
    )
    return ProviderRuntime(
        settings=settings,
        connection_source=source,
        provider=UserProviderService(users=users, credentials=credentials),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the operator command line parser."""

    parser = argparse.ArgumentParser(
        prog="db-user-provider",
        description="Query the configured user database.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("count", help="print the number of users")

    list_parser = commands.add_parser("list", help="list users, optionally one page")
    list_parser.add_argument("--offset", type=int, default=None)
    list_parser.add_argument("--limit", type=int, default=None)

    find_id = commands.add_parser("find-id", help="look up one user by id")
    find_id.add_argument("user_id")

    find_username = commands.add_parser("find-username", help="look up one user by username")
    find_username.add_argument("username")

    search = commands.add_parser("search", help="search users by term")
    search.add_argument("term")

    verify = commands.add_parser("verify", help="verify a password for a username")
    verify.add_argument("username")

    return parser


async def run_command(args: argparse.Namespace, provider: UserProviderService) -> object:
    """Run one parsed command and return a JSON-serializable result."""

    if args.command == "count":
        return await provider.count_users()
    if args.command == "list":
        if args.offset is None and args.limit is None:
            return await provider.list_all_users()
        offset = 0 if args.offset is None else args.offset
        limit = DEFAULT_PAGE_LIMIT if args.limit is None else args.limit
        return await provider.list_users_paged(offset, limit)
    if args.command == "find-id":
        return await provider.find_user_by_id(args.user_id)
    if args.command == "find-username":
        return await provider.find_user_by_username(args.username)
    if args.command == "search":
        return await provider.search_users(args.term)
    if args.command == "verify":
        password = getpass.getpass("Password: ")
        return await provider.verify_credentials(args.username, password)
    raise ValueError(f"unknown command: {args.command}")


async def _run_cli(args: argparse.Namespace) -> None:
    settings = load_settings()
    configure_logging(level=settings.log_level)
    runtime = build_provider_runtime(settings=settings)
    logger.info("provider_cli_command command=%s", args.command)
    try:
        result = await run_command(args, runtime.provider)
    finally:
        await runtime.connection_source.dispose()
    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and run one provider command."""

    args = build_parser().parse_args(argv)
    asyncio.run(_run_cli(args))


if __name__ == "__main__":
    main()
