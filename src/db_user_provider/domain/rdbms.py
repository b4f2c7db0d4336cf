"""Relational engines supported by the paging rewriter."""

from __future__ import annotations

from enum import StrEnum


class Rdbms(StrEnum):
    """Closed set of database dialects accepted in configuration."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    SQLITE = "sqlite"
    H2 = "h2"
    HSQLDB = "hsqldb"
    ORACLE = "oracle"
    ORACLE_12C = "oracle12c"
    SQL_SERVER = "sqlserver"
    DB2 = "db2"
