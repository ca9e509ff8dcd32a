# Core services package
from study.services.ai import AIServiceError, GeminiService, TutorService
from study.services.grading import grade, percentage
from study.services.ingestion import (
    DocumentProcessingError,
    chunk_text,
    ingest_upload,
)
from study.services.retrieval import ChunkRetriever

__all__ = [
    'AIServiceError',
    'GeminiService',
    'TutorService',
    'grade',
    'percentage',
    'DocumentProcessingError',
    'chunk_text',
    'ingest_upload',
    'ChunkRetriever',
]
