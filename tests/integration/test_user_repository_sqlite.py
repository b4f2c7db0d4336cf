from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import bcrypt
import pytest
import sqlalchemy as sa

from apps.provider_cli.main import ProviderRuntime, build_provider_runtime
from db_user_provider.application.services.credential_service import (
    CredentialUpdateNotSupportedError,
)
from db_user_provider.config.settings import Settings

USERNAMES = ["alice", "bob", "carol", "dave", "erin", "frank", "grace"]


def _create_database(tmp_path: Path, filename: str, *, hash_function: str) -> str:
    db_path = tmp_path / filename
    engine = sa.create_engine(f"sqlite+pysqlite:///{db_path}")
    with engine.begin() as connection:
        connection.exec_driver_sql(
            "CREATE TABLE users ("
            "id TEXT PRIMARY KEY, username TEXT NOT NULL, email TEXT, "
            "firstName TEXT, password_hash TEXT)"
        )
        for index, username in enumerate(USERNAMES, start=1):
            password = f"{username}-pw"
            if hash_function == "bcrypt":
                password_hash = bcrypt.hashpw(
                    password.encode("utf-8"), bcrypt.gensalt(rounds=4)
                ).decode("utf-8")
            else:
                password_hash = hashlib.sha256(password.encode("utf-8")).hexdigest()
            connection.exec_driver_sql(
                "INSERT INTO users (id, username, email, firstName, password_hash) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    f"u{index:02d}",
                    username,
                    None if username == "bob" else f"{username}@example.org",
                    username.title(),
                    None if username == "grace" else password_hash,
                ),
            )
    engine.dispose()
    return f"sqlite+aiosqlite:///{db_path}"


def _settings(*, database_url: str | None, hash_function: str = "SHA-256") -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        RDBMS="sqlite",
        HASH_FUNCTION=hash_function,
        QUERY_LIST_ALL="SELECT id, username, email, firstName FROM users ORDER BY id",
        QUERY_COUNT="SELECT COUNT(*) FROM users",
        QUERY_FIND_BY_ID="SELECT id, username, email, firstName FROM users WHERE id = ?",
        QUERY_FIND_BY_USERNAME=(
            "SELECT id, username, email, firstName FROM users WHERE username = ?"
        ),
        QUERY_FIND_BY_SEARCH_TERM=(
            "SELECT id, username, email, firstName FROM users "
            "WHERE username LIKE '%' || ? || '%' ORDER BY id"
        ),
        QUERY_FIND_PASSWORD_HASH="SELECT password_hash FROM users WHERE username = ?",
    )


async def _runtime(tmp_path: Path, filename: str, *, hash_function: str = "SHA-256") -> ProviderRuntime:
    database_url = _create_database(tmp_path, filename, hash_function=hash_function)
    return build_provider_runtime(
        settings=_settings(database_url=database_url, hash_function=hash_function)
    )


@pytest.mark.asyncio
async def test_list_and_count_users(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "list_count.db")
    try:
        users = await runtime.provider.list_all_users()
        count = await runtime.provider.count_users()
    finally:
        await runtime.connection_source.dispose()

    assert count == len(USERNAMES)
    assert [user["username"] for user in users] == USERNAMES
    assert set(users[0]) == {"id", "username", "email", "firstName"}
    assert users[1]["email"] == ""


@pytest.mark.asyncio
async def test_paged_listing_tiles_full_result(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "paged.db")
    try:
        full = await runtime.provider.list_all_users()
        pages = [await runtime.provider.list_users_paged(offset, 3) for offset in (0, 3, 6, 9)]
    finally:
        await runtime.connection_source.dispose()

    assert all(len(page) <= 3 for page in pages)
    assert [len(page) for page in pages] == [3, 3, 1, 0]
    assert [row for page in pages for row in page] == full


@pytest.mark.asyncio
async def test_paged_listing_rejects_invalid_window(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "paged_invalid.db")
    try:
        with pytest.raises(ValueError):
            await runtime.provider.list_users_paged(-1, 3)
        with pytest.raises(ValueError):
            await runtime.provider.list_users_paged(0, 0)
    finally:
        await runtime.connection_source.dispose()


@pytest.mark.asyncio
async def test_find_by_id_and_username(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "find.db")
    try:
        by_id = await runtime.provider.find_user_by_id("u03")
        by_username = await runtime.provider.find_user_by_username("dave")
        missing_id = await runtime.provider.find_user_by_id("u99")
        missing_username = await runtime.provider.find_user_by_username("nobody")
    finally:
        await runtime.connection_source.dispose()

    assert by_id == {
        "id": "u03",
        "username": "carol",
        "email": "carol@example.org",
        "firstName": "Carol",
    }
    assert by_username is not None
    assert by_username["id"] == "u04"
    assert missing_id is None
    assert missing_username is None


@pytest.mark.asyncio
async def test_search_users_matches_term(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "search.db")
    try:
        matches = await runtime.provider.search_users("ra")
        too_short = await runtime.provider.search_users("a")
    finally:
        await runtime.connection_source.dispose()

    assert [row["username"] for row in matches] == ["frank", "grace"]
    assert too_short == []


@pytest.mark.asyncio
async def test_sha256_credentials(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "sha256.db")
    try:
        valid = await runtime.provider.verify_credentials("alice", "alice-pw")
        wrong = await runtime.provider.verify_credentials("alice", "alice-pX")
        unknown = await runtime.provider.verify_credentials("nobody", "alice-pw")
        null_hash = await runtime.provider.verify_credentials("grace", "grace-pw")
    finally:
        await runtime.connection_source.dispose()

    assert valid is True
    assert wrong is False
    assert unknown is False
    assert null_hash is False


@pytest.mark.asyncio
async def test_bcrypt_credentials(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "bcrypt.db", hash_function="bcrypt")
    try:
        valid = await runtime.provider.verify_credentials("erin", "erin-pw")
        wrong = await runtime.provider.verify_credentials("erin", "erin-pW")
    finally:
        await runtime.connection_source.dispose()

    assert valid is True
    assert wrong is False


@pytest.mark.asyncio
async def test_update_credentials_is_not_supported(tmp_path: Path) -> None:
    runtime = await _runtime(tmp_path, "update.db")
    try:
        with pytest.raises(CredentialUpdateNotSupportedError):
            await runtime.provider.update_credentials("u", "p")
    finally:
        await runtime.connection_source.dispose()


@pytest.mark.asyncio
async def test_unconfigured_database_yields_empty_results(
    caplog: pytest.LogCaptureFixture,
) -> None:
    runtime = build_provider_runtime(settings=_settings(database_url=None))

    with caplog.at_level(logging.WARNING):
        assert await runtime.provider.count_users() == 0
        assert await runtime.provider.list_all_users() == []
        assert await runtime.provider.list_users_paged(0, 5) == []
        assert await runtime.provider.find_user_by_id("u01") is None
        assert await runtime.provider.find_user_by_username("alice") is None
        assert await runtime.provider.search_users("alice") == []
        assert await runtime.provider.verify_credentials("alice", "alice-pw") is False

    assert "query_skipped_no_connection" in caplog.text


@pytest.mark.asyncio
async def test_broken_query_looks_like_not_found(tmp_path: Path) -> None:
    database_url = _create_database(tmp_path, "broken.db", hash_function="SHA-256")
    settings = _settings(database_url=database_url).model_copy(
        update={"query_count": "SELECT COUNT(*) FROM missing_table"}
    )
    runtime = build_provider_runtime(settings=settings)
    try:
        count = await runtime.provider.count_users()
    finally:
        await runtime.connection_source.dispose()

    assert count == 0
