"""
Task file persistence: record codec, file helpers and the file-backed manager.
"""

from .core import FileBackedTaskManager
from .codec import FILE_HEADER, encode_record, decode_record

__all__ = [
    'FileBackedTaskManager',
    'FILE_HEADER',
    'encode_record',
    'decode_record',
]
