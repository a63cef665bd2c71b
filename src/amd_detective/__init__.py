"""Extract the dependencies declared by AMD (define/require) JavaScript modules."""

__version__ = "1.0.0"

from .detective import extract
from .error_handling import DetectiveError, InvalidInputError, JavaScriptSyntaxError
from .models import AmdForm, ExtractOptions, FileDependencies, ScanResult
from .scanner import scan_file, scan_files

__all__ = [
    "AmdForm",
    "DetectiveError",
    "ExtractOptions",
    "FileDependencies",
    "InvalidInputError",
    "JavaScriptSyntaxError",
    "ScanResult",
    "extract",
    "scan_file",
    "scan_files",
    "__version__",
]
