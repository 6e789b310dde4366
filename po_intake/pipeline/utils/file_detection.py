"""
Centralized file type detection using magic bytes.

Every module that needs to know what an upload really is imports from here.

Magic bytes reference:
- PDF:  %PDF (0x25504446)
- JPEG: 0xFFD8FF
- PNG:  0x89504E47 (89 P N G)
"""

from typing import Final, Literal, Optional

FileType = Literal["pdf", "jpeg", "png"]

MAGIC_BYTES_MAP: Final[dict[bytes, FileType]] = {
    b"%PDF": "pdf",
    b"\xff\xd8\xff": "jpeg",
    b"\x89PNG": "png",
}

MIME_TO_FILE_TYPE: Final[dict[str, FileType]] = {
    "application/pdf": "pdf",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/png": "png",
}


def detect_file_type_from_bytes(header: bytes) -> Optional[FileType]:
    """
    Detect file type from magic bytes header.

    Example:
        >>> detect_file_type_from_bytes(b'%PDF-1.4')
        'pdf'
    """
    for signature, file_type in MAGIC_BYTES_MAP.items():
        if header.startswith(signature):
            return file_type
    return None


def file_type_from_mime(content_type: str) -> Optional[FileType]:
    return MIME_TO_FILE_TYPE.get((content_type or "").lower())
