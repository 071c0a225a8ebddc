"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .chunk_service import ChunkUploader
from .container_service import ContainerNegotiator

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'ChunkUploader',
    'ContainerNegotiator',
]
