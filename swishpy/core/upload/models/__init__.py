"""Upload models."""
from .upload_models import (
    Chunk,
    LocalFile,
    TransferParameters,
    Container,
    UploadResult,
    ALLOWED_DURATIONS,
    MIN_DOWNLOADS,
    MAX_DOWNLOADS,
)

__all__ = [
    'Chunk',
    'LocalFile',
    'TransferParameters',
    'Container',
    'UploadResult',
    'ALLOWED_DURATIONS',
    'MIN_DOWNLOADS',
    'MAX_DOWNLOADS',
]
