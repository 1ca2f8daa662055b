"""osquery integration (single-shot queries through osqueryd)."""

from orbitctl.osquery.query import (
    UUID_QUERY,
    OsqueryError,
    check_osqueryd_path,
    get_host_uuid,
    query_host_uuid,
    run_query,
)

__all__ = [
    "UUID_QUERY",
    "OsqueryError",
    "check_osqueryd_path",
    "get_host_uuid",
    "query_host_uuid",
    "run_query",
]
