"""
URL configuration for the study app.

API Endpoints:
    GET    /api/health/                                - Service status
    POST   /api/documents/upload/                      - Upload a PDF, DOCX or PPTX
    GET    /api/documents/                             - List all documents
    GET    /api/documents/<id>/content/                - Extracted text and chunks
    GET    /api/documents/<id>/file/                   - Stored original file
    POST   /api/chat/create/                           - Create a chat over documents
    GET    /api/chat/user/                             - List a user's chats
    GET    /api/chat/<id>/                             - Chat with messages
    POST   /api/chat/message/                          - Send a message, get a tutor reply
    POST   /api/quiz/generate/                         - Generate a quiz from a document
    GET    /api/quiz/<id>/                             - Get a quiz
    POST   /api/quiz/submit/                           - Submit answers for grading
    GET    /api/quiz/attempts/user/                    - List a user's attempts
    GET    /api/progress/user/                         - Progress analytics
    GET    /api/videos/recommendations/<id>/           - Videos for one document
    POST   /api/videos/recommendations/bulk/           - Videos for several documents
"""

from django.urls import path

from study.views import (
    BulkVideoRecommendationView,
    ChatCreateView,
    ChatDetailView,
    DocumentContentView,
    DocumentFileView,
    DocumentListView,
    DocumentUploadView,
    GenerateQuizView,
    HealthView,
    QuizAttemptsView,
    QuizDetailView,
    SendMessageView,
    SubmitQuizView,
    UserChatsView,
    UserProgressView,
    VideoRecommendationView,
)


urlpatterns = [
    path('health/', HealthView.as_view(), name='health'),
    path('documents/', DocumentListView.as_view(), name='document-list'),
    path('documents/upload/', DocumentUploadView.as_view(), name='document-upload'),
    path('documents/<int:pk>/content/', DocumentContentView.as_view(), name='document-content'),
    path('documents/<int:pk>/file/', DocumentFileView.as_view(), name='document-file'),
    path('chat/create/', ChatCreateView.as_view(), name='chat-create'),
    path('chat/user/', UserChatsView.as_view(), name='chat-user'),
    path('chat/message/', SendMessageView.as_view(), name='chat-message'),
    path('chat/<int:pk>/', ChatDetailView.as_view(), name='chat-detail'),
    path('quiz/generate/', GenerateQuizView.as_view(), name='quiz-generate'),
    path('quiz/submit/', SubmitQuizView.as_view(), name='quiz-submit'),
    path('quiz/attempts/user/', QuizAttemptsView.as_view(), name='quiz-attempts'),
    path('quiz/<int:pk>/', QuizDetailView.as_view(), name='quiz-detail'),
    path('progress/user/', UserProgressView.as_view(), name='progress-user'),
    path('videos/recommendations/bulk/', BulkVideoRecommendationView.as_view(), name='videos-bulk'),
    path('videos/recommendations/<int:document_id>/', VideoRecommendationView.as_view(), name='videos-document'),
]
