import os

DEFAULT_FILE_NAME = "lockbox.db"
MIN_MASTER_LENGTH = 8

DEFAULT_LOG_LEVEL = "WARNING"


def resolve_vault_path(file_name: str | None) -> str:
    if file_name: return file_name
    env = os.getenv("LOCKBOX_FILE")
    return env if env else DEFAULT_FILE_NAME


def log_level() -> str:
    return os.getenv("LOCKBOX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def log_file() -> str | None:
    return os.getenv("LOCKBOX_LOG_FILE") or None
