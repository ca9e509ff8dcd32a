"""
Data models for the BeyondChat study assistant.

Uploaded textbooks are stored as Documents that own their page-aligned
Chunks. Chats, Quizzes and QuizAttempts reference documents and quizzes
without owning them, so removing a document never erases a student's
history.
"""

from django.db import models
from django.utils import timezone


ANONYMOUS_USER = 'anonymous'


class Document(models.Model):
    """
    An uploaded textbook (PDF, DOCX, or PPTX).

    `content` keeps the full extracted text with form-feed page breaks
    exactly as the extractor produced it. Documents are never edited
    after upload.
    """

    original_name = models.CharField(
        max_length=255,
        help_text="File name as uploaded by the student"
    )
    file = models.FileField(
        upload_to='documents/',
        blank=True,
        help_text="The stored original file (empty for bundled sample chapters)"
    )
    content = models.TextField(
        help_text="Full extracted text, pages separated by form feeds"
    )
    is_sample = models.BooleanField(
        default=False,
        help_text="True for the sample chapters installed by seed_samples"
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at']

    def __str__(self):
        return self.original_name


class Chunk(models.Model):
    """
    A page-aligned segment of a Document's text, the unit of retrieval.

    `page_number` is the 1-based position of the page in the extracted
    text; `chunk_index` is the 0-based position among the chunks that
    were actually kept. Blank pages are skipped, so page numbers may
    have gaps while chunk indexes never do.
    """

    document = models.ForeignKey(
        Document,
        on_delete=models.CASCADE,
        related_name='chunks'
    )
    text = models.TextField(
        help_text="Trimmed page text"
    )
    page_number = models.PositiveIntegerField(
        help_text="1-indexed page position in the extracted text"
    )
    chunk_index = models.PositiveIntegerField(
        help_text="0-indexed position of this chunk within the document"
    )

    class Meta:
        ordering = ['document', 'chunk_index']
        unique_together = ['document', 'chunk_index']
        indexes = [
            models.Index(fields=['document', 'chunk_index'], name='study_chunk_doc_order_idx'),
        ]

    def __str__(self):
        preview = self.text[:50] + '...' if len(self.text) > 50 else self.text
        return f"Chunk {self.chunk_index} (page {self.page_number}): {preview}"


class Chat(models.Model):
    """
    A conversation between a student and the tutor.

    The chat's documents are the context searched for every message.
    """

    user_id = models.CharField(max_length=100, default=ANONYMOUS_USER, db_index=True)
    title = models.CharField(max_length=255, default='New Chat')
    documents = models.ManyToManyField(
        Document,
        blank=True,
        related_name='chats',
        help_text="Documents used as context for this chat"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-last_updated']

    def __str__(self):
        return self.title

    def context_documents(self):
        """Return the chat's documents, oldest upload first."""
        return list(self.documents.prefetch_related('chunks').order_by('pk'))

    def append_message(self, role: str, content: str, citations=None) -> 'Message':
        """Save a new message and bump `last_updated`."""
        message = Message.objects.create(
            chat=self,
            role=role,
            content=content,
            citations=list(citations or []),
        )
        self.last_updated = message.timestamp
        self.save(update_fields=['last_updated'])
        return message


class Message(models.Model):
    """
    One turn of a Chat.

    Citations (assistant messages only) are stored inline as a list of
    {"pageNumber", "snippet", "documentId"} dicts.
    """

    ROLE_USER = 'user'
    ROLE_ASSISTANT = 'assistant'
    ROLE_CHOICES = [
        (ROLE_USER, 'User'),
        (ROLE_ASSISTANT, 'Assistant'),
    ]

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name='messages'
    )
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    content = models.TextField()
    citations = models.JSONField(default=list, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['timestamp', 'pk']

    def __str__(self):
        preview = self.content[:50] + '...' if len(self.content) > 50 else self.content
        return f"[{self.role}] {preview}"


class Quiz(models.Model):
    """
    A generated quiz over one Document.

    Questions are stored as a list of dicts with the keys
    question, type, options, correctAnswer, explanation, pageReference.
    """

    TYPE_MCQ = 'MCQ'
    TYPE_SAQ = 'SAQ'
    TYPE_LAQ = 'LAQ'
    TYPE_CHOICES = [
        (TYPE_MCQ, 'Multiple choice'),
        (TYPE_SAQ, 'Short answer'),
        (TYPE_LAQ, 'Long answer'),
    ]

    document = models.ForeignKey(
        Document,
        on_delete=models.SET_NULL,
        null=True,
        related_name='quizzes'
    )
    quiz_type = models.CharField(max_length=3, choices=TYPE_CHOICES)
    questions = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'quizzes'

    def __str__(self):
        return f"{self.quiz_type} quiz ({len(self.questions)} questions)"


class QuizAttempt(models.Model):
    """A graded submission of a Quiz. Created once, never updated."""

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.SET_NULL,
        null=True,
        related_name='attempts'
    )
    user_id = models.CharField(max_length=100, default=ANONYMOUS_USER, db_index=True)
    answers = models.JSONField(
        default=list,
        help_text="List of {questionIndex, answer, isCorrect}, aligned with quiz questions"
    )
    score = models.PositiveIntegerField(default=0)
    total_questions = models.PositiveIntegerField(default=0)
    attempted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-attempted_at', '-pk']

    def __str__(self):
        return f"Attempt {self.pk}: {self.score}/{self.total_questions}"


class SeedMarker(models.Model):
    """Persisted sentinel recording that a one-time seeding step has run."""

    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name
