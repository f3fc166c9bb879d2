# xmlrpcparser/config/default.py
import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return value


LOGGER_NAME = "xmlrpcparser"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVEL: str = os.getenv("XMLRPC_LOG_LEVEL", "INFO")
IMPLICIT_STRINGS: bool = _env_flag("XMLRPC_IMPLICIT_STRINGS", False)
STRICT_FAULT_SHAPE: bool = _env_flag("XMLRPC_STRICT_FAULT_SHAPE", False)
MAX_DEPTH: int = _env_positive_int("XMLRPC_MAX_DEPTH", 512)
