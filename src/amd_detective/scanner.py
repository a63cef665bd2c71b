"""
File scanning for amd-detective.

Reads JavaScript files from disk with the configured safety limits and runs
the dependency extractor over each of them.
"""

import time
from pathlib import Path
from typing import Iterable, Optional

from .config import get_config
from .detective import Options, extract
from .error_handling import (
    ErrorCallback,
    ErrorCategory,
    JavaScriptSyntaxError,
    get_error_handler,
    log_parsing_error,
)
from .models import ExtractOptions, FileDependencies, ScanResult
from .structured_logging import (
    clear_file_context,
    get_scanner_logger,
    log_scan_complete,
    set_file_context,
)


def _validate_file_path(file_path: str) -> Path:
    """
    Validate a source file path before reading it.

    Args:
        file_path: The file path to validate

    Returns:
        Path: Validated and resolved path object

    Raises:
        ValueError: If path is invalid or unsafe
    """
    if not file_path or not isinstance(file_path, str):
        raise ValueError("File path must be a non-empty string")

    try:
        path = Path(file_path).resolve()
    except (OSError, ValueError) as e:
        raise ValueError(f"Invalid file path: {e}")

    if not path.exists():
        raise ValueError(f"File does not exist: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    config = get_config()
    allowed_extensions = {ext.lower() for ext in config.security.allowed_file_extensions}
    if path.suffix.lower() not in allowed_extensions:
        raise ValueError(f"File type not allowed: {path.suffix or path.name}")

    try:
        file_size = path.stat().st_size
    except OSError as e:
        raise ValueError(f"Cannot access file: {e}")

    max_file_size = config.security.max_file_size_bytes
    if file_size > max_file_size:
        raise ValueError(f"File too large: {file_size} bytes (max: {max_file_size})")

    return path


def _safe_read_file(path: Path) -> str:
    """Read a validated file as UTF-8 text."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError:
        raise ValueError("File contains invalid UTF-8 characters")
    except PermissionError:
        raise ValueError("Permission denied reading file")
    except OSError as e:
        raise ValueError(f"Error reading file: {e}")


def scan_file(file_path: str, options: Options = None) -> FileDependencies:
    """
    Extract the AMD dependencies of a single file.

    Args:
        file_path: Path to a JavaScript file
        options: Extraction options

    Returns:
        FileDependencies: The file and its dependencies

    Raises:
        ValueError: If the file cannot be read safely
        JavaScriptSyntaxError: If the file is not valid JavaScript
    """
    validated_path = _validate_file_path(file_path)
    content = _safe_read_file(validated_path)

    set_file_context(str(validated_path))
    try:
        dependencies = extract(content, options)
    except JavaScriptSyntaxError as e:
        e.filename = str(validated_path)
        log_parsing_error(
            f"Could not parse {validated_path.name}: {e.msg}",
            module="scanner",
            function="scan_file",
            line_number=e.lineno,
            file_path=str(validated_path),
            exception=e,
        )
        raise
    finally:
        clear_file_context()

    get_scanner_logger().debug(
        "file_scanned",
        file_path=str(validated_path),
        dependency_count=len(dependencies),
    )
    return FileDependencies(
        source_file=str(validated_path), dependencies=tuple(dependencies)
    )


def scan_files(
    file_paths: Iterable[str],
    options: Options = None,
    error_callback: Optional[ErrorCallback] = None,
) -> ScanResult:
    """
    Extract the AMD dependencies of several files.

    A file that cannot be read or parsed is recorded in ``errors`` and the
    remaining files are still scanned.

    Args:
        file_paths: Paths to JavaScript files
        options: Extraction options, shared by every file
        error_callback: Optional callback for per-file errors

    Returns:
        ScanResult: Per-file dependencies and errors
    """
    error_handler = get_error_handler()
    if error_callback:
        error_handler.register_callback(error_callback, ErrorCategory.FILESYSTEM)
        error_handler.register_callback(error_callback, ErrorCategory.PARSING)

    opts = ExtractOptions.coerce(options)
    start_time = time.time()
    results = []
    errors = []

    try:
        for file_path in file_paths:
            try:
                results.append(scan_file(file_path, opts))
            except JavaScriptSyntaxError as e:
                # scan_file has already reported it
                errors.append(f"{file_path}: {e}")
            except ValueError as e:
                errors.append(f"{file_path}: {e}")
                error_handler.error(
                    ErrorCategory.FILESYSTEM,
                    f"Failed to scan file: {e}",
                    "scanner",
                    "scan_files",
                    exception=e,
                    details={"file_path": Path(file_path).name},
                )
    finally:
        if error_callback:
            error_handler.unregister_callback(error_callback, ErrorCategory.FILESYSTEM)
            error_handler.unregister_callback(error_callback, ErrorCategory.PARSING)

    duration_ms = int((time.time() - start_time) * 1000)
    result = ScanResult(files=results, scan_duration_ms=duration_ms, errors=errors)
    log_scan_complete(
        len(results), len(errors), result.total_dependencies, duration_ms
    )
    return result
