"""File operation utilities."""

import json
from pathlib import Path
from typing import Any, List, Union


def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure directory exists, create if not."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_json_dump(data: Any, filepath: Union[str, Path], indent: int = 2) -> bool:
    """
    Safely dump JSON to file with atomic write.

    Args:
        data: Data to serialize
        filepath: Target file path
        indent: JSON indentation

    Returns:
        True if successful; on failure the temp file is removed and the
        exception re-raised
    """
    filepath = Path(filepath)
    temp_path = filepath.with_suffix('.tmp')

    try:
        ensure_dir(filepath.parent)
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=indent)
        temp_path.replace(filepath)
        return True
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_json_load(filepath: Union[str, Path], default: Any = None) -> Any:
    """
    Safely load JSON from file.

    Args:
        filepath: Source file path
        default: Default value if file doesn't exist or is invalid

    Returns:
        Loaded data or default value
    """
    filepath = Path(filepath)

    if not filepath.exists():
        return default

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        return default


def read_text(filepath: Union[str, Path]) -> str:
    """Read a note as UTF-8, keeping its line endings untouched."""
    with open(filepath, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def write_text_atomic(filepath: Union[str, Path], content: str) -> None:
    """Write a note through a temp file so a failed write never truncates it."""
    filepath = Path(filepath)
    temp_path = filepath.with_suffix(filepath.suffix + '.tmp')
    try:
        with open(temp_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        temp_path.replace(filepath)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def get_markdown_files(directory: Union[str, Path], recursive: bool = True) -> List[Path]:
    """Get all Markdown notes in directory."""
    directory = Path(directory)
    pattern = "**/*.md" if recursive else "*.md"
    return sorted(p for p in directory.glob(pattern) if p.is_file())
