import shutil
import tempfile
from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from study.models import Chat, Document, Message, Quiz, QuizAttempt
from study.services.ai import CompletionQuotaExceeded, CompletionSuccess, GeminiService, TutorService
from study.services.ingestion import create_document
from study.tests.test_ingestion import make_pdf


class MediaRootMixin:
    def setUp(self):
        super().setUp()
        media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, media_root, ignore_errors=True)
        settings_override = override_settings(MEDIA_ROOT=media_root)
        settings_override.enable()
        self.addCleanup(settings_override.disable)


class DocumentApiTests(MediaRootMixin, APITestCase):
    def upload(self, name, data, field='file'):
        uploaded = SimpleUploadedFile(name, data, content_type='application/octet-stream')
        return self.client.post('/api/documents/upload/', {field: uploaded}, format='multipart')

    def test_upload_two_page_pdf(self):
        response = self.upload('physics.pdf', make_pdf(["Velocity basics", "Acceleration"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "PDF uploaded successfully")
        self.assertEqual(response.data["document"]["pageCount"], 2)
        self.assertEqual(response.data["document"]["originalName"], "physics.pdf")

        document_id = response.data["document"]["id"]
        content = self.client.get(f'/api/documents/{document_id}/content/')
        chunks = content.data["chunks"]
        self.assertEqual([c["chunkIndex"] for c in chunks], [0, 1])
        self.assertEqual([c["pageNumber"] for c in chunks], [1, 2])
        self.assertIn("\f", content.data["content"])

    def test_blank_page_leaves_a_page_gap(self):
        response = self.upload('gap.pdf', make_pdf(["Intro", "", "Forces"]), field='pdf')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["document"]["pageCount"], 2)
        document = Document.objects.get(pk=response.data["document"]["id"])
        self.assertEqual(list(document.chunks.values_list('page_number', flat=True)), [1, 3])

    def test_stored_file_is_served(self):
        response = self.upload('physics.pdf', make_pdf(["Momentum"]))

        file_response = self.client.get(f'/api/documents/{response.data["document"]["id"]}/file/')

        self.assertEqual(file_response.status_code, status.HTTP_200_OK)
        self.assertTrue(b"".join(file_response.streaming_content).startswith(b"%PDF"))
        file_response.close()

    def test_upload_rejections_store_nothing(self):
        self.assertEqual(self.client.post('/api/documents/upload/', {}, format='multipart').status_code, 400)
        self.assertEqual(self.upload('notes.txt', b"plain text").status_code, 400)
        self.assertEqual(self.upload('broken.pdf', b"not a pdf").status_code, 400)
        self.assertEqual(Document.objects.count(), 0)

    @override_settings(MAX_UPLOAD_PAGES=2)
    def test_upload_page_limit(self):
        response = self.upload('long.pdf', make_pdf(["one", "two", "three"]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Document.objects.count(), 0)

    def test_list_and_missing_document(self):
        create_document("a.pdf", "alpha")

        listing = self.client.get('/api/documents/')
        self.assertEqual([d["originalName"] for d in listing.data], ["a.pdf"])

        missing = self.client.get('/api/documents/999/content/')
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data, {"error": "PDF not found"})
        self.assertEqual(self.client.get('/api/documents/999/file/').status_code, 404)


@override_settings(GOOGLE_API_KEY='')
class ChatApiTests(APITestCase):
    def create_chat(self, document_ids=()):
        response = self.client.post(
            '/api/chat/create/',
            {"userId": "student-1", "title": "Revision", "documentIds": list(document_ids)},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response.data["chat"]["id"]

    def send(self, chat_id, message):
        return self.client.post('/api/chat/message/', {"chatId": chat_id, "message": message}, format='json')

    def test_no_credential_and_no_context(self):
        chat_id = self.create_chat()

        response = self.send(chat_id, "Explain entropy")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        reply = response.data["response"]
        self.assertEqual(reply["role"], "assistant")
        self.assertIn(TutorService.NO_CONTEXT_HELP, reply["content"])
        self.assertEqual(reply["citations"], [])

        chat = Chat.objects.get(pk=chat_id)
        roles = list(chat.messages.values_list('role', flat=True))
        self.assertEqual(roles, [Message.ROLE_USER, Message.ROLE_ASSISTANT])
        self.assertEqual(chat.last_updated, chat.messages.last().timestamp)

    def test_reply_cites_matching_pages(self):
        document = create_document("motion.pdf", "Speed is scalar.\fVelocity is a vector quantity.")
        chat_id = self.create_chat([document.pk])

        response = self.send(chat_id, "velocity please")

        citations = response.data["response"]["citations"]
        self.assertEqual(citations, [{
            "pageNumber": 2,
            "snippet": "Velocity is a vector quantity....",
            "documentId": document.pk,
        }])
        self.assertIn("Page 2: Velocity is a vector quantity.", response.data["response"]["content"])

    @override_settings(GOOGLE_API_KEY='test-key')
    def test_ai_reply(self):
        chat_id = self.create_chat()

        with patch.object(GeminiService, 'complete', return_value=CompletionSuccess(text="Entropy measures disorder.")):
            response = self.send(chat_id, "Explain entropy")

        self.assertEqual(response.data["response"]["content"], "Entropy measures disorder.")

    @override_settings(GOOGLE_API_KEY='test-key')
    def test_quota_reply(self):
        chat_id = self.create_chat()

        with patch.object(GeminiService, 'complete', return_value=CompletionQuotaExceeded("429")):
            response = self.send(chat_id, "Explain entropy")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("**AI quota exceeded**", response.data["response"]["content"])

    def test_chat_detail_and_user_listing(self):
        chat_id = self.create_chat()
        self.send(chat_id, "hello")

        detail = self.client.get(f'/api/chat/{chat_id}/')
        self.assertEqual(len(detail.data["messages"]), 2)
        self.assertEqual(detail.data["userId"], "student-1")

        listing = self.client.get('/api/chat/user/', {"userId": "student-1"})
        self.assertEqual([c["id"] for c in listing.data], [chat_id])
        self.assertEqual(self.client.get('/api/chat/user/').data, [])

    def test_missing_chat_and_documents(self):
        self.assertEqual(self.send(999, "hi").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/chat/999/').status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.post('/api/chat/create/', {"documentIds": [999]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Chat.objects.count(), 0)


@override_settings(GOOGLE_API_KEY='')
class QuizApiTests(APITestCase):
    def setUp(self):
        self.document = create_document("motion.pdf", "Velocity\fAcceleration\fForce")

    def generate(self, **overrides):
        payload = {"documentId": self.document.pk, "type": "MCQ", "questionCount": 2}
        payload.update(overrides)
        return self.client.post('/api/quiz/generate/', payload, format='json')

    def test_sample_quiz_without_credential(self):
        response = self.generate()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("Sample quiz generated", response.data["message"])
        self.assertEqual(len(response.data["quiz"]["questions"]), 2)
        self.assertEqual(response.data["quiz"]["documentId"], self.document.pk)
        self.assertNotIn("note", response.data)

    @override_settings(GOOGLE_API_KEY='test-key')
    def test_quota_quiz_uses_document_chunks(self):
        with patch.object(GeminiService, 'complete', return_value=CompletionQuotaExceeded("429")):
            response = self.generate(questionCount=5)

        questions = response.data["quiz"]["questions"]
        self.assertEqual(len(questions), 3)
        self.assertEqual([q["pageReference"] for q in questions], [1, 2, 3])
        self.assertIn("note", response.data)

    def test_generate_validation(self):
        self.assertEqual(self.generate(documentId=999).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.generate(type="ESSAY").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.generate(questionCount=0).status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_grades_and_records_attempt(self):
        quiz = Quiz.objects.create(
            document=self.document,
            quiz_type='MCQ',
            questions=[
                {"question": "Q1", "type": "MCQ", "options": ["a", "b"], "correctAnswer": "a"},
                {"question": "Q2", "type": "MCQ", "options": ["a", "B"], "correctAnswer": "B"},
            ],
        )

        response = self.client.post(
            '/api/quiz/submit/',
            {"quizId": quiz.pk, "answers": ["A", "wrong"], "userId": "student-1"},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        attempt = response.data["attempt"]
        self.assertEqual(attempt["score"], 1)
        self.assertEqual(attempt["totalQuestions"], 2)
        self.assertEqual([a["isCorrect"] for a in attempt["answers"]], [True, False])
        self.assertEqual(attempt["documentName"], "motion.pdf")
        self.assertEqual(response.data["percentage"], 50)
        self.assertEqual(QuizAttempt.objects.filter(user_id="student-1").count(), 1)

    def test_submit_to_missing_quiz(self):
        response = self.client.post('/api/quiz/submit/', {"quizId": 999, "answers": []}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(QuizAttempt.objects.count(), 0)

    def test_quiz_detail(self):
        quiz_id = self.generate().data["quiz"]["id"]

        self.assertEqual(self.client.get(f'/api/quiz/{quiz_id}/').data["type"], "MCQ")
        self.assertEqual(self.client.get('/api/quiz/999/').status_code, status.HTTP_404_NOT_FOUND)

    def test_attempts_and_progress(self):
        quiz = Quiz.objects.create(
            document=self.document,
            quiz_type='SAQ',
            questions=[{"question": "Q", "type": "SAQ", "options": None, "correctAnswer": "yes"}],
        )
        for answer in ["yes", "no"]:
            self.client.post(
                '/api/quiz/submit/',
                {"quizId": quiz.pk, "answers": [answer], "userId": "student-1"},
                format='json',
            )

        attempts = self.client.get('/api/quiz/attempts/user/', {"userId": "student-1"})
        self.assertEqual(len(attempts.data), 2)

        progress = self.client.get('/api/progress/user/', {"userId": "student-1"})
        self.assertEqual(progress.data["totalAttempts"], 2)
        self.assertEqual(progress.data["averageScore"], 50)
        self.assertEqual(len(progress.data["recentAttempts"]), 2)
        self.assertEqual(progress.data["pdfStats"]["motion.pdf"]["attempts"], 2)

        empty = self.client.get('/api/progress/user/', {"userId": "nobody"})
        self.assertEqual(empty.data["totalAttempts"], 0)
        self.assertEqual(empty.data["averageScore"], 0)


class VideoApiTests(APITestCase):
    def test_recommendations_for_document(self):
        document = create_document("Motion.pdf", "Motion and velocity.\fForce and acceleration.")

        response = self.client.get(f'/api/videos/recommendations/{document.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pdfTitle"], "Motion.pdf")
        self.assertIn("velocity", response.data["keywords"])
        self.assertTrue(1 <= len(response.data["videos"]) <= 8)

    def test_missing_document(self):
        response = self.client.get('/api/videos/recommendations/999/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_recommendations(self):
        first = create_document("Heat.pdf", "heat and temperature")
        second = create_document("Waves.pdf", "waves and sound")

        response = self.client.post(
            '/api/videos/recommendations/bulk/',
            {"documentIds": [second.pk, first.pk]},
            format='json',
        )

        self.assertEqual(response.data["sourceTitle"], "Heat.pdf, Waves.pdf")
        self.assertIn("heat", response.data["keywords"])
        self.assertIn("waves", response.data["keywords"])

    def test_bulk_requires_ids(self):
        response = self.client.post('/api/videos/recommendations/bulk/', {"documentIds": []}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "PDF IDs are required")


class HealthApiTests(APITestCase):
    @override_settings(GOOGLE_API_KEY='')
    def test_health(self):
        response = self.client.get('/api/health/')

        self.assertEqual(response.data["status"], "healthy")
        self.assertFalse(response.data["completion"]["configured"])
