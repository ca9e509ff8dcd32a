"""
Serializers for the study app.

Provides Django REST Framework serializers for API data transformation.
Field names follow the camelCase JSON contract used by the frontend.
"""

import io
import logging

from django.conf import settings
from rest_framework import serializers

from study.models import Chat, Chunk, Document, Message, Quiz, QuizAttempt
from study.services.ingestion import SUPPORTED_EXTENSIONS


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Documents
# ─────────────────────────────────────────────────────────────────

class ChunkSerializer(serializers.ModelSerializer):
    pageNumber = serializers.IntegerField(source='page_number')
    chunkIndex = serializers.IntegerField(source='chunk_index')

    class Meta:
        model = Chunk
        fields = ['text', 'pageNumber', 'chunkIndex']


class DocumentSerializer(serializers.ModelSerializer):
    """Document summary used in listings."""

    originalName = serializers.CharField(source='original_name')
    uploadDate = serializers.DateTimeField(source='uploaded_at')
    isSample = serializers.BooleanField(source='is_sample')

    class Meta:
        model = Document
        fields = ['id', 'originalName', 'uploadDate', 'isSample']


class DocumentContentSerializer(serializers.ModelSerializer):
    """Full document text and chunks."""

    originalName = serializers.CharField(source='original_name')
    uploadDate = serializers.DateTimeField(source='uploaded_at')
    chunks = ChunkSerializer(many=True, read_only=True)

    class Meta:
        model = Document
        fields = ['id', 'originalName', 'content', 'chunks', 'uploadDate']


class DocumentUploadSerializer(serializers.Serializer):
    """
    Validates an uploaded file.

    Enforces supported extensions and a maximum page (or slide) count
    to prevent system overload.
    """

    file = serializers.FileField()

    def validate_file(self, value):
        file_name_lower = value.name.lower()
        max_pages = settings.MAX_UPLOAD_PAGES

        if not file_name_lower.endswith(SUPPORTED_EXTENSIONS):
            raise serializers.ValidationError("Only PDF, DOCX, and PPTX files are allowed.")

        if file_name_lower.endswith('.pdf'):
            try:
                from pypdf import PdfReader

                value.seek(0)
                page_count = len(PdfReader(value).pages)
            except Exception as e:
                # Unreadable here means extraction will report the real error
                logger.warning(f"PDF Validation Warning: Could not count pages - {e}")
                page_count = 0
            finally:
                value.seek(0)

            if page_count > max_pages:
                raise serializers.ValidationError(
                    f"PDF too large. Max {max_pages} pages allowed. (Got {page_count})"
                )

        elif file_name_lower.endswith('.pptx'):
            try:
                from pptx import Presentation

                value.seek(0)
                slide_count = len(Presentation(io.BytesIO(value.read())).slides)
            except Exception as e:
                logger.warning(f"PPTX Validation Warning: Could not count slides - {e}")
                slide_count = 0
            finally:
                value.seek(0)

            if slide_count > max_pages:
                raise serializers.ValidationError(
                    f"Presentation too large. Max {max_pages} slides allowed. (Got {slide_count})"
                )

        value.seek(0)
        return value


# ─────────────────────────────────────────────────────────────────
# Chat
# ─────────────────────────────────────────────────────────────────

class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = ['id', 'role', 'content', 'citations', 'timestamp']


class ChatDocumentSerializer(serializers.ModelSerializer):
    originalName = serializers.CharField(source='original_name')

    class Meta:
        model = Document
        fields = ['id', 'originalName']


class ChatSerializer(serializers.ModelSerializer):
    userId = serializers.CharField(source='user_id')
    documents = ChatDocumentSerializer(many=True, read_only=True)
    messages = MessageSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at')
    lastUpdated = serializers.DateTimeField(source='last_updated')

    class Meta:
        model = Chat
        fields = ['id', 'userId', 'title', 'documents', 'messages', 'createdAt', 'lastUpdated']


class ChatSummarySerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at')
    lastUpdated = serializers.DateTimeField(source='last_updated')

    class Meta:
        model = Chat
        fields = ['id', 'title', 'lastUpdated', 'createdAt']


class ChatCreateRequestSerializer(serializers.Serializer):
    userId = serializers.CharField(required=False, default='anonymous', max_length=100)
    title = serializers.CharField(required=False, default='New Chat', max_length=255)
    documentIds = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        default=list,
        help_text="Documents to use as chat context"
    )


class SendMessageRequestSerializer(serializers.Serializer):
    chatId = serializers.IntegerField()
    message = serializers.CharField(allow_blank=False, trim_whitespace=False)


# ─────────────────────────────────────────────────────────────────
# Quiz
# ─────────────────────────────────────────────────────────────────

class QuizSerializer(serializers.ModelSerializer):
    documentId = serializers.PrimaryKeyRelatedField(source='document', read_only=True)
    documentName = serializers.SerializerMethodField()
    type = serializers.CharField(source='quiz_type')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Quiz
        fields = ['id', 'documentId', 'documentName', 'type', 'questions', 'createdAt']

    def get_documentName(self, obj) -> str:
        return obj.document.original_name if obj.document else ""


class QuizAttemptSerializer(serializers.ModelSerializer):
    quizId = serializers.PrimaryKeyRelatedField(source='quiz', read_only=True)
    userId = serializers.CharField(source='user_id')
    totalQuestions = serializers.IntegerField(source='total_questions')
    attemptedAt = serializers.DateTimeField(source='attempted_at')
    documentName = serializers.SerializerMethodField()

    class Meta:
        model = QuizAttempt
        fields = [
            'id', 'quizId', 'userId', 'answers', 'score',
            'totalQuestions', 'attemptedAt', 'documentName',
        ]

    def get_documentName(self, obj) -> str:
        if obj.quiz and obj.quiz.document:
            return obj.quiz.document.original_name
        return ""


class QuizGenerateRequestSerializer(serializers.Serializer):
    documentId = serializers.IntegerField()
    type = serializers.ChoiceField(choices=[choice for choice, _ in Quiz.TYPE_CHOICES])
    questionCount = serializers.IntegerField(required=False, default=5, min_value=1, max_value=20)


class QuizSubmitRequestSerializer(serializers.Serializer):
    quizId = serializers.IntegerField()
    answers = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False, allow_null=True),
        allow_empty=True,
    )
    userId = serializers.CharField(required=False, default='anonymous', max_length=100)


# ─────────────────────────────────────────────────────────────────
# Videos
# ─────────────────────────────────────────────────────────────────

class BulkRecommendationRequestSerializer(serializers.Serializer):
    documentIds = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
    )
