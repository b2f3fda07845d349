"""env-scan: find environment variable references and declare them in .env."""

from .env_file import ENV_FILENAME, ENV_HEADER, EnvFile, ReconcileResult
from .extractor import extract, extract_env_vars, find_env_vars, iter_env_references
from .scanner import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, ScanReport, scan_files
from .sync import SyncOutcome, sync_env

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_EXCLUDE",
    "DEFAULT_INCLUDE",
    "ENV_FILENAME",
    "ENV_HEADER",
    "EnvFile",
    "ReconcileResult",
    "ScanReport",
    "SyncOutcome",
    "extract",
    "extract_env_vars",
    "find_env_vars",
    "iter_env_references",
    "scan_files",
    "sync_env",
]
