"""Client-side checks run on files before they are sent for upload.

A file is accepted when it has a name, a size in (0, max_bytes], and an
extension registered for the chosen language.
"""

from __future__ import annotations

from codesim.errors import UploadValidationError
from codesim.models.code_file import SupportedLanguage

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

LANGUAGE_EXTENSIONS: dict[SupportedLanguage, tuple[str, ...]] = {
    SupportedLanguage.JAVA: (".java",),
    SupportedLanguage.PYTHON: (".py",),
    SupportedLanguage.CPP: (".cpp", ".c", ".h", ".hpp"),
    SupportedLanguage.GO: (".go",),
    SupportedLanguage.RUBY: (".rb",),
    SupportedLanguage.ADA: (".ada", ".adb", ".ads"),
    SupportedLanguage.JAVASCRIPT: (".js",),
    SupportedLanguage.TYPESCRIPT: (".ts",),
}


def _extension(file_name: str) -> str:
    dot = file_name.rfind(".")
    return file_name[dot:].lower() if dot != -1 else ""


def validate_upload(
    file_name: str | None,
    size: int | None,
    language: SupportedLanguage,
    max_bytes: int = MAX_FILE_SIZE,
) -> str | None:
    """Return a human-readable problem with the file, or None if it is acceptable."""
    if not file_name:
        return "File is missing a valid name"
    if size is not None and size > max_bytes:
        return (
            f'File "{file_name}" exceeds the maximum size of '
            f"{format_file_size(max_bytes)}"
        )
    if not size:
        return f'File "{file_name}" has an invalid or empty size'
    extensions = LANGUAGE_EXTENSIONS[language]
    if _extension(file_name) not in extensions:
        return (
            f'File "{file_name}" has an invalid extension for {language.value}. '
            f"Expected: {', '.join(extensions)}"
        )
    return None


def validate_uploads(
    files: list[tuple[str | None, int | None]],
    language: SupportedLanguage,
    max_bytes: int = MAX_FILE_SIZE,
) -> None:
    """Validate every (name, size) pair; raise UploadValidationError listing all problems."""
    problems = [
        problem
        for name, size in files
        if (problem := validate_upload(name, size, language, max_bytes)) is not None
    ]
    if not files:
        problems.append("No files were provided")
    if problems:
        raise UploadValidationError(problems)


def format_file_size(num_bytes: int) -> str:
    """Render a byte count as e.g. ``'1.5 KB'``; at most two decimals."""
    if not num_bytes or num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"
