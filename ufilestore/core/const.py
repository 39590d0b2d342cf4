import os

DEFAULT_SCHEME = os.getenv("UFILE_DEFAULT_SCHEME", "http")
DEFAULT_SUFFIX = ".ufile.ucloud.cn"

# Payloads above this size go through the multipart protocol (50 MiB).
MAX_PUT_SIZE = 52428800

DEFAULT_HTTP_TIMEOUT_SECONDS = 60.0
DEFAULT_CONFIG_SECTION = "ufile"

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain"

AUTH_SCHEME = "UCloud"
ETAG_HEADER = "ETag"


def default_max_workers() -> int:
    """Default size of the part upload pool: a small multiple of the CPU count."""
    return max(1, 2 * (os.cpu_count() or 1))
