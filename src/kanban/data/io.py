import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from kanban.recovery import FileOperationError
from kanban.logs import get_logger

log = get_logger("io")

def _cleanup(temp_path: Optional[str]):
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as cleanup_error:
        # Don't mask the original error, just log
        log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def atomic_write(file_path: Union[Path, str], lines: Iterable[str]) -> bool:
    """
    Write newline-terminated lines to a UTF-8 text file using atomic updates.

    The content goes to a temporary file next to the target which then replaces
    the target, so readers see either the old or the new file.
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        # Create temporary file in the same directory as target for atomicity
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='\n', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            for line in lines:
                temp_file.write(line)
                temp_file.write('\n')
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")
        return True

    except (IOError, OSError, PermissionError) as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def read_lines(file_path: Union[Path, str]) -> Optional[List[str]]:
    """
    Read a UTF-8 text file as a list of lines without terminators.

    Both LF and CRLF line endings are accepted.

    Returns:
        The lines, or None if the file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (IOError, OSError, PermissionError, UnicodeDecodeError) as e:
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e

    lines = content.split('\n')
    if lines[-1] == '':
        lines.pop()
    return lines
