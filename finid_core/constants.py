SCHEMA_VERSION = "1.0"

# Numeric failure codes surfaced in Result.code
ERR_UNAUTHORIZED = 100
ERR_NOT_FOUND = 101
ERR_FORBIDDEN = 102

DOCUMENT_HASH_LEN = 32

DEFAULT_STORAGE_PROVIDER = "sqlite"
DEFAULT_DB_PATH = "db/finid_state.db"
