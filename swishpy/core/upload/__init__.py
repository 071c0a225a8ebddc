"""
Upload module for SwissTransfer.

Negotiates a container, streams each file as fixed-size chunks and
finalizes the container into a share link.
"""
from .coordinator import UploadCoordinator
from .models import Chunk, LocalFile, TransferParameters, Container, UploadResult
from .strategies import plan, FixedSizeChunkingStrategy
from .services import FileValidator, AsyncFileReader, ChunkUploader, ContainerNegotiator
from .protocols import (
    ChunkingStrategy,
    FileReaderProtocol,
    ChunkUploaderProtocol,
    ContainerNegotiatorProtocol,
)

__all__ = [
    # Main classes
    'UploadCoordinator',
    'ContainerNegotiator',
    'ChunkUploader',
    'FileValidator',
    'AsyncFileReader',

    # Planning
    'plan',
    'FixedSizeChunkingStrategy',

    # Models
    'Chunk',
    'LocalFile',
    'TransferParameters',
    'Container',
    'UploadResult',

    # Protocols
    'ChunkingStrategy',
    'FileReaderProtocol',
    'ChunkUploaderProtocol',
    'ContainerNegotiatorProtocol',
]
