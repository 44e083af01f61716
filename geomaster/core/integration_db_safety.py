from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.engine import URL, make_url

TEST_DB_MARKER = "test"
LOCAL_DB_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "geomaster_postgres"})


@dataclass(frozen=True, slots=True)
class IntegrationDbTarget:
    is_safe: bool
    reason: str
    database_name: str
    host: str


_RULES: tuple[tuple[Callable[[URL], bool], str], ...] = (
    (
        lambda url: url.get_backend_name() == "postgresql",
        "ranked play integration tests run against PostgreSQL only",
    ),
    (
        lambda url: bool((url.database or "").strip()),
        "database name is empty",
    ),
    (
        lambda url: TEST_DB_MARKER in (url.database or "").lower(),
        f"database name must contain '{TEST_DB_MARKER}'",
    ),
    (
        lambda url: (url.host or "").strip().lower() in LOCAL_DB_HOSTS,
        "host is not a local integration-test host",
    ),
)


def assess_integration_db_target(database_url: str) -> IntegrationDbTarget:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()
    for check, reason in _RULES:
        if not check(url):
            return IntegrationDbTarget(is_safe=False, reason=reason, database_name=database_name, host=host)
    return IntegrationDbTarget(is_safe=True, reason="ok", database_name=database_name, host=host)


def assert_safe_integration_db(database_url: str) -> None:
    """Integration fixtures truncate every game table; refuse anything but a local test DB."""
    target = assess_integration_db_target(database_url)
    if target.is_safe:
        return
    raise RuntimeError(
        "Refusing to truncate game tables for integration tests: "
        f"{target.reason} (database='{target.database_name}', host='{target.host}'). "
        "Point DATABASE_URL at a local database such as 'geomaster_test'."
    )
