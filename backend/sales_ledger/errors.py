from enum import Enum


class ErrorType(Enum):
    # Startup (fatal)
    CONFIG_ERROR = "config_error"
    STORE_CONNECT_ERROR = "store_connect_error"
    SCHEMA_ERROR = "schema_error"

    # Runtime store failures
    QUERY_ERROR = "query_error"
    SCAN_ERROR = "scan_error"
    INSERT_ERROR = "insert_error"
    DELETE_ERROR = "delete_error"
    STORE_UNAVAILABLE = "store_unavailable"

    # Request problems
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.CONFIG_ERROR: 500,
    ErrorType.STORE_CONNECT_ERROR: 500,
    ErrorType.SCHEMA_ERROR: 500,
    ErrorType.QUERY_ERROR: 500,
    ErrorType.SCAN_ERROR: 500,
    ErrorType.INSERT_ERROR: 500,
    ErrorType.DELETE_ERROR: 500,
    ErrorType.STORE_UNAVAILABLE: 500,
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.INTERNAL_ERROR: 500,
}
