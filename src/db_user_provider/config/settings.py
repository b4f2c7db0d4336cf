"""Runtime settings loaded from environment variables."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from db_user_provider.domain.hash_scheme import HashScheme, parse_hash_scheme
from db_user_provider.domain.rdbms import Rdbms

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveInt = Annotated[int, Field(gt=0)]


@dataclass(frozen=True)
class QueryConfigurations:
    """Per-deployment SQL templates plus dialect and hash scheme."""

    list_all: str
    count: str
    find_by_id: str
    find_by_username: str
    find_by_search_term: str
    find_password_hash: str
    rdbms: Rdbms
    hash_scheme: HashScheme


class Settings(BaseSettings):
    """Environment-driven provider settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr | None = Field(default=None, validation_alias="DATABASE_URL")
    rdbms: Rdbms = Field(default=Rdbms.POSTGRESQL, validation_alias="RDBMS")
    database_pool_size: PositiveInt = Field(default=10, validation_alias="DATABASE_POOL_SIZE")
    database_pool_max_overflow: NonNegativeInt = Field(
        default=5,
        validation_alias="DATABASE_POOL_MAX_OVERFLOW",
    )
    database_pool_timeout_seconds: NonNegativeFloat = Field(
        default=30.0,
        validation_alias="DATABASE_POOL_TIMEOUT_SECONDS",
    )
    database_pool_pre_ping: bool = Field(default=True, validation_alias="DATABASE_POOL_PRE_PING")
    query_list_all: NonEmptyStr = Field(validation_alias="QUERY_LIST_ALL")
    query_count: NonEmptyStr = Field(validation_alias="QUERY_COUNT")
    query_find_by_id: NonEmptyStr = Field(validation_alias="QUERY_FIND_BY_ID")
    query_find_by_username: NonEmptyStr = Field(validation_alias="QUERY_FIND_BY_USERNAME")
    query_find_by_search_term: NonEmptyStr = Field(validation_alias="QUERY_FIND_BY_SEARCH_TERM")
    query_find_password_hash: NonEmptyStr = Field(validation_alias="QUERY_FIND_PASSWORD_HASH")
    hash_function: NonEmptyStr = Field(
        default="Blowfish (bcrypt)",
        validation_alias="HASH_FUNCTION",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    _hash_scheme: HashScheme = PrivateAttr()

    @field_validator("rdbms", mode="before")
    @classmethod
    def normalize_rdbms(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("hash_function")
    @classmethod
    def validate_hash_function(cls, value: str) -> str:
        parse_hash_scheme(value)
        return value

    def model_post_init(self, __context: Any) -> None:
        self._hash_scheme = parse_hash_scheme(self.hash_function)

    @property
    def hash_scheme(self) -> HashScheme:
        """Return the hash scheme resolved when settings loaded."""

        return self._hash_scheme

    def query_configurations(self) -> QueryConfigurations:
        """Return the query templates with dialect and resolved hash scheme."""

        return QueryConfigurations(
            list_all=self.query_list_all,
            count=self.query_count,
            find_by_id=self.query_find_by_id,
            find_by_username=self.query_find_by_username,
            find_by_search_term=self.query_find_by_search_term,
            find_password_hash=self.query_find_password_hash,
            rdbms=self.rdbms,
            hash_scheme=self._hash_scheme,
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache provider settings."""

    return Settings()  # type: ignore[call-arg]
