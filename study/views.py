"""
Core API Views for BeyondChat.

This module provides the REST API endpoints that orchestrate the
study assistant:
    1. Document upload and ingestion (page-aligned chunks)
    2. Chat: keyword retrieval → tutor reply with page citations
    3. Quizzes: generation, grading and attempt history
    4. Progress analytics and video recommendations
"""

import logging
from datetime import datetime, timezone

from django.http import FileResponse

from rest_framework import status
from rest_framework.generics import ListAPIView
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from study.models import ANONYMOUS_USER, Chat, Document, Message, Quiz, QuizAttempt
from study.serializers import (
    BulkRecommendationRequestSerializer,
    ChatCreateRequestSerializer,
    ChatSerializer,
    ChatSummarySerializer,
    DocumentContentSerializer,
    DocumentSerializer,
    DocumentUploadSerializer,
    MessageSerializer,
    QuizAttemptSerializer,
    QuizGenerateRequestSerializer,
    QuizSerializer,
    QuizSubmitRequestSerializer,
    SendMessageRequestSerializer,
)
from study.services import ChunkRetriever, GeminiService, TutorService
from study.services.grading import grade, percentage
from study.services.ingestion import DocumentProcessingError, ingest_upload
from study.services.progress import summarize_progress
from study.services.videos import recommend_for_text


logger = logging.getLogger(__name__)


def _not_found(message: str) -> Response:
    return Response({"error": message}, status=status.HTTP_404_NOT_FOUND)


def _missing_documents(document_ids):
    """Return the requested ids that have no Document, in request order."""
    found = set(Document.objects.filter(pk__in=document_ids).values_list('id', flat=True))
    return [doc_id for doc_id in document_ids if doc_id not in found]


class HealthView(APIView):
    """
    GET /api/health/

    Reports service status and whether AI completions are configured.
    """

    def get(self, request):
        return Response({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "completion": GeminiService.health_check(),
        })


class DocumentUploadView(APIView):
    """
    API endpoint for uploading a textbook.

    POST /api/documents/upload/

    Request:
        Content-Type: multipart/form-data
        - file: PDF, DOCX or PPTX file (field name `pdf` is also accepted)

    Response (200 OK):
        {
            "message": "PDF uploaded successfully",
            "document": {
                "id": 1,
                "originalName": "physics.pdf",
                "uploadDate": "2024-01-15T10:30:00Z",
                "pageCount": 12
            }
        }

    Response (400): no file, unsupported type, too many pages, or the
    file could not be read.
    """

    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        """Handle document file upload."""
        uploaded_file = request.FILES.get('file') or request.FILES.get('pdf')
        if uploaded_file is None:
            return Response(
                {"error": "No file uploaded"},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = DocumentUploadSerializer(data={'file': uploaded_file})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            document = ingest_upload(serializer.validated_data['file'])
        except DocumentProcessingError as e:
            logger.warning(f"Upload rejected: {e}")
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Document uploaded: {document.original_name} (ID: {document.pk})")

        return Response({
            "message": "PDF uploaded successfully",
            "document": {
                "id": document.pk,
                "originalName": document.original_name,
                "uploadDate": DocumentSerializer(document).data['uploadDate'],
                "pageCount": document.chunks.count(),
            },
        })


class DocumentListView(ListAPIView):
    """
    GET /api/documents/

    Lists all documents, newest first.
    """

    serializer_class = DocumentSerializer
    pagination_class = None

    def get_queryset(self):
        return Document.objects.all().order_by('-uploaded_at', '-pk')


class DocumentContentView(APIView):
    """
    GET /api/documents/<pk>/content/

    Returns the extracted text and chunks of a document.
    """

    def get(self, request, pk):
        document = Document.objects.filter(pk=pk).first()
        if document is None:
            return _not_found("PDF not found")
        return Response(DocumentContentSerializer(document).data)


class DocumentFileView(APIView):
    """
    GET /api/documents/<pk>/file/

    Streams the stored original file inline.
    """

    def get(self, request, pk):
        document = Document.objects.filter(pk=pk).first()
        if document is None:
            return _not_found("PDF not found")

        if not document.file or not document.file.storage.exists(document.file.name):
            return _not_found("PDF file not found on disk")

        return FileResponse(
            document.file.open('rb'),
            filename=document.original_name,
            as_attachment=False,
        )


class ChatCreateView(APIView):
    """
    POST /api/chat/create/

    Request Body:
        {"userId": "anonymous", "title": "New Chat", "documentIds": [1, 2]}
    """

    parser_classes = [JSONParser]

    def post(self, request):
        serializer = ChatCreateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        document_ids = data['documentIds']

        missing_ids = _missing_documents(document_ids)
        if missing_ids:
            return _not_found(f"Document(s) not found: {missing_ids}")

        chat = Chat.objects.create(user_id=data['userId'], title=data['title'])
        if document_ids:
            chat.documents.set(document_ids)

        logger.info(f"Chat created: {chat.title} (ID: {chat.pk}) with {len(document_ids)} document(s)")

        return Response({
            "message": "Chat created successfully",
            "chat": ChatSerializer(chat).data,
        })


class UserChatsView(ListAPIView):
    """
    GET /api/chat/user/?userId=anonymous

    Lists a user's chats, most recently active first.
    """

    serializer_class = ChatSummarySerializer
    pagination_class = None

    def get_queryset(self):
        user_id = self.request.query_params.get('userId', ANONYMOUS_USER)
        return Chat.objects.filter(user_id=user_id).order_by('-last_updated', '-pk')


class ChatDetailView(APIView):
    """
    GET /api/chat/<pk>/

    Returns a chat with its messages and context documents.
    """

    def get(self, request, pk):
        chat = Chat.objects.filter(pk=pk).prefetch_related('messages', 'documents').first()
        if chat is None:
            return _not_found("Chat not found")
        return Response(ChatSerializer(chat).data)


class SendMessageView(APIView):
    """
    Main chat endpoint.

    POST /api/chat/message/

    Request Body:
        {"chatId": 1, "message": "What is velocity?"}

    Response:
        {
            "message": "Message sent successfully",
            "response": {
                "role": "assistant",
                "content": "...",
                "citations": [{"pageNumber": 3, "snippet": "...", "documentId": 1}],
                "timestamp": "..."
            }
        }
    """

    parser_classes = [JSONParser]

    def post(self, request):
        serializer = SendMessageRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        chat_id = serializer.validated_data['chatId']
        question = serializer.validated_data['message']

        chat = Chat.objects.filter(pk=chat_id).first()
        if chat is None:
            return _not_found("Chat not found")

        # ─────────────────────────────────────────────────────────────
        # Step 1: SAVE USER MESSAGE
        # ─────────────────────────────────────────────────────────────
        chat.append_message(Message.ROLE_USER, question)

        # ─────────────────────────────────────────────────────────────
        # Step 2: RETRIEVAL across the chat's documents
        # ─────────────────────────────────────────────────────────────
        retrieval = ChunkRetriever.match(question, chat.context_documents())

        # ─────────────────────────────────────────────────────────────
        # Step 3: GENERATION (with fallbacks)
        # ─────────────────────────────────────────────────────────────
        reply = TutorService.build_reply(question, retrieval.context_text)

        # ─────────────────────────────────────────────────────────────
        # Step 4: SAVE ASSISTANT MESSAGE
        # ─────────────────────────────────────────────────────────────
        assistant_message = chat.append_message(
            Message.ROLE_ASSISTANT,
            reply,
            citations=retrieval.citations,
        )

        logger.info(
            f"Chat {chat.pk}: replied with {len(retrieval.citations)} citation(s)"
        )

        return Response({
            "message": "Message sent successfully",
            "response": MessageSerializer(assistant_message).data,
        })


class GenerateQuizView(APIView):
    """
    API endpoint for generating a quiz from a document.

    POST /api/quiz/generate/

    Request Body:
        {"documentId": 1, "type": "MCQ" | "SAQ" | "LAQ", "questionCount": 5}

    Response:
        {
            "message": "...",
            "quiz": {"id": 1, "documentId": 1, "type": "MCQ", "questions": [...], ...},
            "note": "..."  # only when questions came from a fallback
        }
    """

    parser_classes = [JSONParser]

    MESSAGES = {
        TutorService.SOURCE_SAMPLE: "Sample quiz generated (Google API key required for AI-generated content)",
        TutorService.SOURCE_AI: "Quiz generated successfully",
        TutorService.SOURCE_PARSE_FALLBACK: "Quiz generated successfully",
        TutorService.SOURCE_QUOTA_FALLBACK: "Quiz generated from PDF content (AI quota exceeded)",
        TutorService.SOURCE_ERROR_FALLBACK: "Quiz generated with placeholder questions (AI service unavailable)",
    }

    def post(self, request):
        serializer = QuizGenerateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        document = Document.objects.filter(pk=data['documentId']).first()
        if document is None:
            return _not_found("PDF not found")

        logger.info(
            f"Generating {data['questionCount']} {data['type']} questions "
            f"for document {document.pk}"
        )

        draft = TutorService.generate_quiz(
            document.chunks.all(),
            quiz_type=data['type'],
            question_count=data['questionCount'],
        )

        quiz = Quiz.objects.create(
            document=document,
            quiz_type=data['type'],
            questions=draft.questions,
        )

        response_data = {
            "message": self.MESSAGES[draft.source],
            "quiz": QuizSerializer(quiz).data,
        }
        if draft.note:
            response_data["note"] = draft.note

        logger.info(f"Quiz {quiz.pk} created via {draft.source} with {len(draft.questions)} questions")
        return Response(response_data)


class QuizDetailView(APIView):
    """GET /api/quiz/<pk>/"""

    def get(self, request, pk):
        quiz = Quiz.objects.select_related('document').filter(pk=pk).first()
        if quiz is None:
            return _not_found("Quiz not found")
        return Response(QuizSerializer(quiz).data)


class SubmitQuizView(APIView):
    """
    POST /api/quiz/submit/

    Request Body:
        {"quizId": 1, "answers": ["A", "wrong"], "userId": "anonymous"}

    Response:
        {"message": "...", "attempt": {...}, "percentage": 50}
    """

    parser_classes = [JSONParser]

    def post(self, request):
        serializer = QuizSubmitRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        quiz = Quiz.objects.select_related('document').filter(pk=data['quizId']).first()
        if quiz is None:
            return _not_found("Quiz not found")

        attempt = grade(quiz, data['answers'], user_id=data['userId'])
        attempt.save()

        return Response({
            "message": "Quiz submitted successfully",
            "attempt": QuizAttemptSerializer(attempt).data,
            "percentage": percentage(attempt.score, attempt.total_questions),
        })


def _user_attempts(request):
    user_id = request.query_params.get('userId', ANONYMOUS_USER)
    return (
        QuizAttempt.objects
        .filter(user_id=user_id)
        .select_related('quiz', 'quiz__document')
        .order_by('-attempted_at', '-pk')
    )


class QuizAttemptsView(ListAPIView):
    """
    GET /api/quiz/attempts/user/?userId=anonymous

    Lists a user's quiz attempts, newest first.
    """

    serializer_class = QuizAttemptSerializer
    pagination_class = None

    def get_queryset(self):
        return _user_attempts(self.request)


class UserProgressView(APIView):
    """
    GET /api/progress/user/?userId=anonymous

    Response:
        {
            "totalAttempts": 4,
            "averageScore": 63,
            "recentAttempts": [...],
            "strengths": [{"topic": "...", "percentage": 80}],
            "weaknesses": [{"topic": "...", "percentage": 40}],
            "pdfStats": {"...": {"attempts": 2, "totalScore": 8, "totalQuestions": 10}}
        }
    """

    def get(self, request):
        summary = summarize_progress(_user_attempts(request))
        summary["recentAttempts"] = QuizAttemptSerializer(summary["recentAttempts"], many=True).data
        return Response(summary)


class VideoRecommendationView(APIView):
    """
    GET /api/videos/recommendations/<document_id>/

    Response:
        {"pdfTitle": "...", "keywords": [...], "videos": [...]}
    """

    def get(self, request, document_id):
        document = Document.objects.filter(pk=document_id).first()
        if document is None:
            return _not_found("PDF not found")

        result = recommend_for_text(document.content, document.original_name)
        return Response({
            "pdfTitle": document.original_name,
            "keywords": result["keywords"],
            "videos": result["videos"],
        })


class BulkVideoRecommendationView(APIView):
    """
    POST /api/videos/recommendations/bulk/

    Request Body:
        {"documentIds": [1, 2]}

    Recommends videos for the combined content of several documents.
    """

    parser_classes = [JSONParser]

    def post(self, request):
        serializer = BulkRecommendationRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "PDF IDs are required", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        documents = list(
            Document.objects.filter(pk__in=serializer.validated_data['documentIds']).order_by('pk')
        )
        combined_content = ' '.join(document.content for document in documents)
        combined_title = ', '.join(document.original_name for document in documents)

        result = recommend_for_text(combined_content, combined_title)
        return Response({
            "sourceTitle": combined_title,
            "keywords": result["keywords"],
            "videos": result["videos"],
        })
