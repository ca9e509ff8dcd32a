from types import SimpleNamespace
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings
from google.api_core import exceptions as google_exceptions

from study.services.ai import (
    CompletionFailed,
    CompletionQuotaExceeded,
    CompletionSuccess,
    GeminiService,
    TutorService,
)


class FakeClient:
    """Completion client returning a canned result."""

    def __init__(self, result=None, configured=True):
        self.result = result
        self.configured = configured
        self.calls = []

    def is_configured(self):
        return self.configured

    def complete(self, **kwargs):
        self.calls.append(kwargs)
        return self.result


def make_chunks(count):
    return [
        SimpleNamespace(text=f"Chunk {i} talks about momentum and energy.", page_number=i + 1)
        for i in range(count)
    ]


CONTEXT = "Page 2: Velocity is the rate of change of displacement...\n\n"


class BuildReplyTests(SimpleTestCase):
    def test_unconfigured_without_context(self):
        client = FakeClient(configured=False)

        reply = TutorService.build_reply("Explain entropy", "", client=client)

        self.assertTrue(reply.startswith('I understand you\'re asking about: "Explain entropy"'))
        self.assertIn(TutorService.NO_CONTEXT_HELP, reply)
        self.assertEqual(client.calls, [])

    def test_unconfigured_with_context_quotes_excerpts(self):
        reply = TutorService.build_reply("velocity", CONTEXT, client=FakeClient(configured=False))

        self.assertIn(CONTEXT, reply)
        self.assertIn("relevant excerpts", reply)

    def test_success_returns_completion_text(self):
        client = FakeClient(CompletionSuccess(text="Velocity is a vector."))

        reply = TutorService.build_reply("velocity", CONTEXT, client=client)

        self.assertEqual(reply, "Velocity is a vector.")
        call = client.calls[0]
        self.assertEqual(call["user_prompt"], "velocity")
        self.assertIn(CONTEXT, call["system_prompt"])
        self.assertIn("cite page numbers", call["system_prompt"])
        self.assertEqual(call["temperature"], 0.7)
        self.assertEqual(call["max_tokens"], 1000)

    def test_system_prompt_without_context(self):
        client = FakeClient(CompletionSuccess(text="ok"))

        TutorService.build_reply("hello", "", client=client)

        self.assertNotIn("Context from uploaded materials", client.calls[0]["system_prompt"])

    def test_quota_with_context(self):
        reply = TutorService.build_reply(
            "velocity", CONTEXT, client=FakeClient(CompletionQuotaExceeded("429"))
        )

        self.assertIn("**AI quota exceeded**", reply)
        self.assertIn(CONTEXT, reply)
        self.assertIn("**Study Tip**", reply)

    def test_quota_without_context(self):
        reply = TutorService.build_reply(
            "velocity", "", client=FakeClient(CompletionQuotaExceeded("429"))
        )

        self.assertIn("**AI quota exceeded**", reply)
        self.assertIn("Please upload study materials (PDFs)", reply)

    def test_other_failure(self):
        with_context = TutorService.build_reply("q", CONTEXT, client=FakeClient(CompletionFailed("boom")))
        without_context = TutorService.build_reply("q", "", client=FakeClient(CompletionFailed("boom")))

        self.assertIn("I encountered an issue with the AI service", with_context)
        self.assertTrue(with_context.endswith(CONTEXT))
        self.assertTrue(without_context.endswith("Please upload study materials to get context-specific help."))


class ParseQuestionsTests(SimpleTestCase):
    def test_object_with_questions(self):
        text = (
            '{"questions": [{"question": "What is speed?", "options": ["a", "b", "c", "d"], '
            '"correctAnswer": "a", "explanation": "e", "pageReference": "3"}]}'
        )

        questions = TutorService.parse_questions(text, "MCQ")

        self.assertEqual(len(questions), 1)
        self.assertEqual(questions[0]["type"], "MCQ")
        self.assertEqual(questions[0]["options"], ["a", "b", "c", "d"])
        self.assertEqual(questions[0]["pageReference"], 3)

    def test_fenced_bare_list(self):
        text = '```json\n[{"question": "Define work.", "options": ["x"], "correctAnswer": "F.d"}]\n```'

        questions = TutorService.parse_questions(text, "SAQ")

        self.assertEqual(len(questions), 1)
        self.assertIsNone(questions[0]["options"])
        self.assertEqual(questions[0]["pageReference"], 1)
        self.assertEqual(questions[0]["explanation"], "")

    def test_json_embedded_in_prose(self):
        text = 'Here you go: {"questions": [{"question": "Q1", "correctAnswer": "A"}]} Enjoy!'

        self.assertEqual(len(TutorService.parse_questions(text, "LAQ")), 1)

    def test_unusable_output(self):
        self.assertEqual(TutorService.parse_questions("no json here", "MCQ"), [])
        self.assertEqual(TutorService.parse_questions("", "MCQ"), [])
        self.assertEqual(TutorService.parse_questions('{"questions": "nope"}', "MCQ"), [])
        self.assertEqual(TutorService.parse_questions('[{"answer": "no question"}]', "MCQ"), [])


class GenerateQuizTests(SimpleTestCase):
    def test_unconfigured_returns_samples(self):
        draft = TutorService.generate_quiz(make_chunks(3), "MCQ", 5, client=FakeClient(configured=False))

        self.assertEqual(draft.source, TutorService.SOURCE_SAMPLE)
        self.assertEqual(len(draft.questions), 2)
        self.assertEqual(draft.questions[1]["correctAnswer"], "Meter")

    def test_sample_text_questions_have_no_options(self):
        draft = TutorService.generate_quiz([], "SAQ", 5, client=FakeClient(configured=False))

        self.assertTrue(all(q["options"] is None for q in draft.questions))
        self.assertTrue(all(q["type"] == "SAQ" for q in draft.questions))

    def test_ai_success(self):
        client = FakeClient(CompletionSuccess(
            text='{"questions": [{"question": "Q1", "correctAnswer": "A"}, {"question": "Q2", "correctAnswer": "B"}]}'
        ))

        draft = TutorService.generate_quiz(make_chunks(8), "SAQ", 2, client=client)

        self.assertEqual(draft.source, TutorService.SOURCE_AI)
        self.assertEqual([q["question"] for q in draft.questions], ["Q1", "Q2"])
        prompt = client.calls[0]["user_prompt"]
        self.assertIn("generate 2 SAQ questions", prompt)
        self.assertIn("Chunk 4", prompt)
        self.assertNotIn("Chunk 5", prompt)
        self.assertIsNone(client.calls[0]["system_prompt"])
        self.assertEqual(client.calls[0]["max_tokens"], 2000)

    def test_unparseable_success_gives_placeholder(self):
        draft = TutorService.generate_quiz(make_chunks(2), "MCQ", 3, client=FakeClient(CompletionSuccess("garbage")))

        self.assertEqual(draft.source, TutorService.SOURCE_PARSE_FALLBACK)
        self.assertEqual(len(draft.questions), 1)
        self.assertEqual(draft.questions[0]["options"], ["Topic A", "Topic B", "Topic C", "Topic D"])

    def test_quota_builds_questions_from_chunks(self):
        draft = TutorService.generate_quiz(make_chunks(4), "MCQ", 3, client=FakeClient(CompletionQuotaExceeded()))

        self.assertEqual(draft.source, TutorService.SOURCE_QUOTA_FALLBACK)
        self.assertIsNotNone(draft.note)
        self.assertEqual(len(draft.questions), 3)
        first = draft.questions[0]
        self.assertTrue(first["question"].startswith("Based on page 1, what is discussed"))
        self.assertEqual(first["correctAnswer"], "All of the above")
        self.assertEqual([q["pageReference"] for q in draft.questions], [1, 2, 3])

    def test_quota_with_fewer_chunks_than_requested(self):
        draft = TutorService.generate_quiz(make_chunks(2), "LAQ", 5, client=FakeClient(CompletionQuotaExceeded()))

        self.assertEqual(len(draft.questions), 2)
        self.assertIsNone(draft.questions[0]["options"])

    def test_quota_without_chunks(self):
        draft = TutorService.generate_quiz([], "MCQ", 5, client=FakeClient(CompletionQuotaExceeded()))

        self.assertEqual(len(draft.questions), 1)
        self.assertEqual(draft.questions[0]["correctAnswer"], "Science")

    def test_other_failure_gives_placeholder(self):
        draft = TutorService.generate_quiz(make_chunks(1), "SAQ", 5, client=FakeClient(CompletionFailed("timeout")))

        self.assertEqual(draft.source, TutorService.SOURCE_ERROR_FALLBACK)
        self.assertEqual(draft.details, {"error": "timeout"})
        self.assertIsNone(draft.questions[0]["options"])


@override_settings(GOOGLE_API_KEY='test-key', GEMINI_MODEL_NAME='gemini-test')
class GeminiServiceTests(SimpleTestCase):
    @override_settings(GOOGLE_API_KEY='your_google_api_key_here')
    def test_placeholder_key_is_not_configured(self):
        self.assertFalse(GeminiService.is_configured())

    @override_settings(GOOGLE_API_KEY='')
    def test_missing_key_fails_without_calling_api(self):
        with patch('study.services.ai.genai') as mock_genai:
            result = GeminiService.complete("sys", "hi", 0.7, 100)

        self.assertIsInstance(result, CompletionFailed)
        mock_genai.GenerativeModel.assert_not_called()

    @patch('study.services.ai.genai')
    def test_success(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value.text = "Answer"

        result = GeminiService.complete("sys", "hi", 0.5, 100)

        self.assertEqual(result, CompletionSuccess(text="Answer"))
        kwargs = mock_genai.GenerativeModel.call_args.kwargs
        self.assertEqual(kwargs["model_name"], "gemini-test")
        self.assertEqual(kwargs["system_instruction"], "sys")
        mock_genai.GenerationConfig.assert_called_once_with(temperature=0.5, max_output_tokens=100)

    @patch('study.services.ai.genai')
    def test_quota_error_is_classified(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = (
            google_exceptions.ResourceExhausted("Quota exceeded")
        )

        result = GeminiService.complete(None, "hi", 0.7, 100)

        self.assertIsInstance(result, CompletionQuotaExceeded)

    @patch('study.services.ai.genai')
    def test_other_errors_are_failures(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.side_effect = (
            google_exceptions.DeadlineExceeded("timed out")
        )

        result = GeminiService.complete(None, "hi", 0.7, 100)

        self.assertIsInstance(result, CompletionFailed)
        self.assertIn("timed out", result.detail)

    @patch('study.services.ai.genai')
    def test_empty_text_is_a_failure(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value.text = "   "

        result = GeminiService.complete(None, "hi", 0.7, 100)

        self.assertIsInstance(result, CompletionFailed)
