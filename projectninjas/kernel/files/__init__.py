"""
Project file handling: ingestion, stamping, storage and download.
"""

from projectninjas.kernel.files.file_service import ProjectFileService
from projectninjas.kernel.files.ingestion import FileIngestionPipeline, IncomingFile
from projectninjas.kernel.files.media import MediaKind, detect_media_kind
from projectninjas.kernel.files.storage import ContentStore, sanitize_filename
from projectninjas.kernel.files.watermark import WATERMARK_TEXT, image_to_pdf, stamp_pdf

__all__ = [
    "ContentStore",
    "FileIngestionPipeline",
    "IncomingFile",
    "MediaKind",
    "ProjectFileService",
    "WATERMARK_TEXT",
    "detect_media_kind",
    "image_to_pdf",
    "sanitize_filename",
    "stamp_pdf",
]
