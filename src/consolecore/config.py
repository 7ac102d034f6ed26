"""consolecore configuration

Settings are grouped by subsystem:
- logging and metrics
- VT output: default colour, line ending, escape accumulation
- line reader: buffer sizes, wait back-off, context cache
- path search: default extension list
- encoding: active encoding and single-byte code page
- terminal queries
"""

import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


_LINE_ENDINGS = {"crlf": "\r\n", "lf": "\n", "cr": "\r"}

# === Logging ===
LOG_LEVEL = os.environ.get("CONSOLECORE_LOG_LEVEL", "INFO")  # log level for configure_logging()

# === Metrics ===
METRICS_ENABLED = _env_flag("CONSOLECORE_METRICS", True)

# === VT output ===
DEFAULT_COLOR = 0x07  # grey on black when no console can be sampled
DEFAULT_LINE_ENDING = _LINE_ENDINGS.get(
    os.environ.get("CONSOLECORE_LINE_ENDING", "crlf").lower(), "\r\n"
)
VT_MAX_PENDING_CHARS = 4096  # unterminated escape longer than this is truncated

# === Line reader ===
LINE_READ_MIN_BUFFER = 256 * 1024  # scratch buffer floor (bytes)
LINE_READ_RETRY_BYTES = 16 * 1024  # read size after MemoryError
LINE_READ_CACHE_SLOTS = 4
LINE_READ_CACHE_ENABLED = _env_flag("CONSOLECORE_LINE_READ_CACHE", True)
LINE_READ_INITIAL_DELAY_MS = 1
LINE_READ_MAX_DELAY_MS = 500  # back-off cap while polling a pipe

# === Path search ===
DEFAULT_PATHEXT = ".com;.exe;.bat;.cmd"

# === Encoding ===
DEFAULT_ENCODING = os.environ.get("CONSOLECORE_ENCODING", "utf-8")
SINGLE_BYTE_CODEPAGE = os.environ.get("CONSOLECORE_CODEPAGE", "cp437")

# === Terminal ===
TERM_CAPABILITIES_VAR = "CONSOLECORE_TERM"  # e.g. "color;extendedchars;autolinewrap"
DEFAULT_WINDOW_WIDTH = 80
DEFAULT_WINDOW_HEIGHT = 25
