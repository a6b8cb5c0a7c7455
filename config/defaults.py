"""Default configuration values."""

DEFAULT_STORAGE = "sqlite"
DEFAULT_SQLITE_PATH = "data/counter.db"

# JSONBin document store
DEFAULT_JSONBIN_BASE_URL = "https://api.jsonbin.io/v3/b"
DEFAULT_JSONBIN_TIMEOUT_SECONDS = 10.0

# Daily reset at 11 PM IST
DEFAULT_RESET_HOUR = 23
DEFAULT_RESET_MINUTE = 0
DEFAULT_RESET_TIMEZONE = "Asia/Kolkata"

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_CORS_ORIGINS = "*"
DEFAULT_LOG_LEVEL = "INFO"

CONFIG_FILENAMES = ("counter.jsonc", "counter.json")
