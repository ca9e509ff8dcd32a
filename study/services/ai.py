"""
Gemini AI Service for BeyondChat.

Implements the Generative AI Layer that:
1. Builds tutor prompts from retrieved page context
2. Calls the Google Gemini API through a thin completion client
3. Falls back to templated replies (or chunk-derived quiz questions)
   whenever the API is unconfigured, over quota, or failing

The completion client never raises to its callers. It returns one of
CompletionSuccess, CompletionQuotaExceeded or CompletionFailed, and
TutorService decides what the student sees for each outcome.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

import google.generativeai as genai
from django.conf import settings
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import HarmBlockThreshold, HarmCategory


logger = logging.getLogger(__name__)

# Values shipped in example .env files that are not real keys
PLACEHOLDER_API_KEYS = {'your_google_api_key_here', 'dummy-key'}


class AIServiceError(Exception):
    """Raised when the AI service is used without a usable configuration."""
    pass


@dataclass(frozen=True)
class CompletionSuccess:
    text: str


@dataclass(frozen=True)
class CompletionQuotaExceeded:
    detail: str = ""


@dataclass(frozen=True)
class CompletionFailed:
    detail: str = ""


CompletionResult = Union[CompletionSuccess, CompletionQuotaExceeded, CompletionFailed]


class GeminiService:
    """
    Completion client for the Google Gemini API.

    Turns every API outcome into a CompletionResult: a rate/quota
    rejection (HTTP 429) becomes CompletionQuotaExceeded, anything else
    that goes wrong (timeouts, blocked or empty responses, network
    errors) becomes CompletionFailed.
    """

    _configured_key = None

    @classmethod
    def api_key(cls) -> str:
        return (getattr(settings, 'GOOGLE_API_KEY', '') or '').strip()

    @classmethod
    def is_configured(cls) -> bool:
        """True when a usable API key is present in settings."""
        key = cls.api_key()
        return bool(key) and key not in PLACEHOLDER_API_KEYS

    @classmethod
    def _ensure_configured(cls) -> None:
        """Configure the Gemini SDK with the current API key."""
        if not cls.is_configured():
            raise AIServiceError(
                "GOOGLE_API_KEY not found in environment variables. "
                "Please set it in your .env file or environment."
            )

        key = cls.api_key()
        if cls._configured_key == key:
            return

        genai.configure(api_key=key)
        cls._configured_key = key
        logger.info("Gemini API configured successfully")

    @classmethod
    def complete(
        cls,
        system_prompt: Optional[str],
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> CompletionResult:
        """
        Request one completion.

        Args:
            system_prompt: System instruction, or None for a bare prompt.
            user_prompt: The user turn.
            temperature: Sampling temperature.
            max_tokens: Output token budget.

        Returns:
            A CompletionResult; this method does not raise.
        """
        try:
            cls._ensure_configured()

            # Academic material regularly trips the default filters
            safety_settings = {
                HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
            }

            model = genai.GenerativeModel(
                model_name=settings.GEMINI_MODEL_NAME,
                system_instruction=system_prompt or None,
                generation_config=genai.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
                safety_settings=safety_settings,
            )

            response = model.generate_content(
                user_prompt,
                request_options={"timeout": settings.COMPLETION_TIMEOUT_SECONDS},
            )
            text = response.text

        except google_exceptions.TooManyRequests as e:
            # ResourceExhausted (quota) is a subclass of TooManyRequests
            logger.warning(f"Gemini quota exceeded: {e}")
            return CompletionQuotaExceeded(detail=str(e))
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            return CompletionFailed(detail=str(e))

        if not text or not text.strip():
            logger.warning("Empty response from Gemini API")
            return CompletionFailed(detail="Empty response")

        return CompletionSuccess(text=text)

    @classmethod
    def health_check(cls) -> dict:
        """Report whether completions are available without calling the API."""
        return {
            "configured": cls.is_configured(),
            "model": settings.GEMINI_MODEL_NAME,
        }


@dataclass
class QuizDraft:
    """Questions produced for a quiz request, and which path produced them."""

    questions: List[dict]
    source: str
    note: Optional[str] = None
    details: dict = field(default_factory=dict)


class TutorService:
    """
    Builds tutor replies and quizzes, degrading gracefully.

    Every request walks the same states, first success wins:
    no credential → templated output without calling the API;
    AI → the completion text;
    quota exceeded / other failure → templated output grounded in the
    retrieved context (or, for quizzes, in the document's chunks).
    """

    SOURCE_SAMPLE = 'sample'
    SOURCE_AI = 'ai'
    SOURCE_PARSE_FALLBACK = 'parse_fallback'
    SOURCE_QUOTA_FALLBACK = 'quota_fallback'
    SOURCE_ERROR_FALLBACK = 'error_fallback'

    QUIZ_CONTENT_CHUNKS = 5

    NO_CONTEXT_HELP = (
        "I'd be happy to help, but I need access to your study materials first. "
        "Please upload some PDFs and add them to this chat context for me to "
        "provide relevant information."
    )

    # ─────────────────────────────────────────────────────────────────
    # CHAT
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def build_system_prompt(cls, context_text: str) -> str:
        if context_text:
            return (
                "You are a helpful AI tutor assistant. Use the provided context from "
                "educational materials to answer questions. Always cite page numbers "
                "when referencing the material.\n\n"
                f"Context from uploaded materials:\n{context_text}"
            )
        return (
            "You are a helpful AI tutor assistant. Answer educational questions "
            "to the best of your ability."
        )

    @classmethod
    def build_reply(cls, query: str, context_text: str, client=GeminiService) -> str:
        """
        Produce the assistant's reply to a chat message.

        Args:
            query: The student's message.
            context_text: Context block from ChunkRetriever (may be empty).
            client: Completion client, GeminiService by default.

        Returns:
            Reply text. Never raises for completion problems.
        """
        if not client.is_configured():
            logger.info("No completion credential configured, using templated reply")
            return cls._unconfigured_reply(query, context_text)

        result = client.complete(
            system_prompt=cls.build_system_prompt(context_text),
            user_prompt=query,
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
        )

        if isinstance(result, CompletionSuccess):
            return result.text
        if isinstance(result, CompletionQuotaExceeded):
            logger.warning("Chat reply degraded: completion quota exceeded")
            return cls._quota_reply(query, context_text)
        if isinstance(result, CompletionFailed):
            logger.warning(f"Chat reply degraded: {result.detail}")
            return cls._error_reply(context_text)
        raise TypeError(f"Unknown completion result: {result!r}")

    @classmethod
    def _unconfigured_reply(cls, query: str, context_text: str) -> str:
        reply = f'I understand you\'re asking about: "{query}"\n\n'
        if context_text:
            reply += (
                "Based on the uploaded materials, here are some relevant excerpts:"
                f"\n\n{context_text}\n\n"
                "Note: AI-powered responses are not available without a valid Google "
                "API key. The above content is directly from your uploaded materials."
            )
        else:
            reply += (
                f"{cls.NO_CONTEXT_HELP}\n\n"
                "Note: AI-powered responses require a valid Google API key."
            )
        return reply

    @classmethod
    def _quota_reply(cls, query: str, context_text: str) -> str:
        reply = f'I understand you\'re asking about: "{query}"\n\n'
        reply += "**AI quota exceeded** - AI features are temporarily unavailable.\n\n"
        if context_text:
            reply += (
                "However, I can still help you with information from your uploaded "
                f"materials:\n\n{context_text}\n\n"
                "**Study Tip**: Review the above content carefully and try to understand "
                "the key concepts. You can also ask more specific questions about the material."
            )
        else:
            reply += (
                "Please upload study materials (PDFs) to get context-specific help "
                "even without AI features."
            )
        return reply

    @classmethod
    def _error_reply(cls, context_text: str) -> str:
        return (
            "I encountered an issue with the AI service. However, I can still help you "
            "with the information from your materials:\n\n"
            f"{context_text or 'Please upload study materials to get context-specific help.'}"
        )

    # ─────────────────────────────────────────────────────────────────
    # QUIZ
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def build_quiz_prompt(cls, content: str, quiz_type: str, question_count: int) -> str:
        return f"""Based on the following educational content, generate {question_count} {quiz_type} questions:

Content:
{content}

Requirements:
- For MCQ: Provide 4 options (A, B, C, D) with one correct answer
- For SAQ: Short answer questions requiring 2-3 sentences
- For LAQ: Long answer questions requiring detailed explanations
- Include explanations for each answer
- Reference page numbers when possible

Return ONLY a JSON object, no markdown, with this structure:
{{
  "questions": [
    {{
      "question": "Question text",
      "type": "{quiz_type}",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "Correct answer text",
      "explanation": "Detailed explanation",
      "pageReference": 1
    }}
  ]
}}
Only MCQ questions have "options"."""

    @classmethod
    def generate_quiz(cls, chunks, quiz_type: str, question_count: int, client=GeminiService) -> QuizDraft:
        """
        Produce quiz questions for a document.

        Args:
            chunks: The document's chunks in order (objects with text and page_number).
            quiz_type: 'MCQ', 'SAQ' or 'LAQ'.
            question_count: Number of questions requested.
            client: Completion client, GeminiService by default.

        Returns:
            QuizDraft with at least one question. Never raises for
            completion or parsing problems.
        """
        chunks = list(chunks)

        if not client.is_configured():
            logger.info("No completion credential configured, returning sample quiz")
            return QuizDraft(
                questions=cls.sample_questions(quiz_type),
                source=cls.SOURCE_SAMPLE,
            )

        content = "\n\n".join(chunk.text for chunk in chunks[:cls.QUIZ_CONTENT_CHUNKS])
        result = client.complete(
            system_prompt=None,
            user_prompt=cls.build_quiz_prompt(content, quiz_type, question_count),
            temperature=settings.QUIZ_TEMPERATURE,
            max_tokens=settings.QUIZ_MAX_TOKENS,
        )

        if isinstance(result, CompletionSuccess):
            questions = cls.parse_questions(result.text, quiz_type)
            if questions:
                logger.info(f"Generated {len(questions)} {quiz_type} questions")
                return QuizDraft(questions=questions, source=cls.SOURCE_AI)
            logger.warning("Quiz response could not be parsed, using placeholder question")
            return QuizDraft(
                questions=[cls.placeholder_question(quiz_type)],
                source=cls.SOURCE_PARSE_FALLBACK,
            )
        if isinstance(result, CompletionQuotaExceeded):
            logger.warning("Quiz generation degraded: completion quota exceeded")
            return QuizDraft(
                questions=cls.questions_from_chunks(chunks, quiz_type, question_count),
                source=cls.SOURCE_QUOTA_FALLBACK,
                note=(
                    "AI-powered question generation is temporarily unavailable due to "
                    "quota limits. Questions are based on your PDF content."
                ),
            )
        if isinstance(result, CompletionFailed):
            logger.warning(f"Quiz generation degraded: {result.detail}")
            return QuizDraft(
                questions=[cls.placeholder_question(quiz_type)],
                source=cls.SOURCE_ERROR_FALLBACK,
                details={"error": result.detail},
            )
        raise TypeError(f"Unknown completion result: {result!r}")

    @classmethod
    def _clean_response(cls, response_text: str) -> str:
        """Strip markdown code fences the model sometimes adds despite instructions."""
        text = (response_text or "").strip()

        if text.startswith("```json"):
            text = text[7:]
        elif text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return text.strip()

    @classmethod
    def parse_questions(cls, response_text: str, quiz_type: str) -> List[dict]:
        """
        Parse a model response into normalized question dicts.

        Accepts {"questions": [...]} or a bare list. Entries without
        question text are dropped.

        Returns:
            List of questions; empty if nothing usable was found.
        """
        cleaned = cls._clean_response(response_text)
        if not cleaned:
            return []

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            # Try the outermost JSON object or array in the text
            match = re.search(r'(\{[\s\S]*\}|\[[\s\S]*\])', cleaned)
            if not match:
                return []
            try:
                data = json.loads(match.group())
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse quiz JSON: {e}")
                return []

        if isinstance(data, dict):
            data = data.get("questions")
        if not isinstance(data, list):
            return []

        questions = []
        for item in data:
            if not isinstance(item, dict) or not str(item.get("question", "")).strip():
                continue
            questions.append(cls._normalize_question(item, quiz_type))
        return questions

    @classmethod
    def _normalize_question(cls, item: dict, quiz_type: str) -> dict:
        options = item.get("options")
        if quiz_type == 'MCQ' and isinstance(options, list):
            options = [str(option) for option in options]
        else:
            options = None

        try:
            page_reference = int(item.get("pageReference", 1))
        except (TypeError, ValueError):
            page_reference = 1

        return {
            "question": str(item.get("question", "")).strip(),
            "type": quiz_type,
            "options": options,
            "correctAnswer": str(item.get("correctAnswer", "")),
            "explanation": str(item.get("explanation", "")),
            "pageReference": page_reference,
        }

    @classmethod
    def _question(cls, quiz_type, question, options, mcq_answer, text_answer, explanation, page_reference):
        is_mcq = quiz_type == 'MCQ'
        return {
            "question": question,
            "type": quiz_type,
            "options": options if is_mcq else None,
            "correctAnswer": mcq_answer if is_mcq else text_answer,
            "explanation": explanation,
            "pageReference": page_reference,
        }

    @classmethod
    def sample_questions(cls, quiz_type: str) -> List[dict]:
        """Fixed questions served when no API key is configured."""
        return [
            cls._question(
                quiz_type,
                "What is the main topic discussed in this material?",
                ["Physics concepts", "Mathematical formulas", "Scientific methods", "All of the above"],
                "All of the above",
                "The material discusses fundamental physics concepts, mathematical formulas, "
                "and scientific methods.",
                "This is a sample question. Please add your Google API key to enable "
                "AI-generated questions.",
                1,
            ),
            cls._question(
                quiz_type,
                "Which of the following is a fundamental unit in physics?",
                ["Meter", "Kilometer", "Centimeter", "Millimeter"],
                "Meter",
                "Meter is the fundamental unit of length in the SI system.",
                "The meter is the base unit of length in the International System of Units (SI).",
                2,
            ),
        ]

    @classmethod
    def placeholder_question(cls, quiz_type: str) -> dict:
        """Single question used when the model's output is unusable."""
        return {
            "question": "What is the main topic discussed in this content?",
            "type": quiz_type,
            "options": ["Topic A", "Topic B", "Topic C", "Topic D"] if quiz_type == 'MCQ' else None,
            "correctAnswer": "Please refer to the content",
            "explanation": "This question tests understanding of the main concepts.",
            "pageReference": 1,
        }

    @classmethod
    def questions_from_chunks(cls, chunks, quiz_type: str, question_count: int) -> List[dict]:
        """
        Build page-grounded questions straight from chunk text.

        One question per chunk among the first `question_count` chunks;
        a single generic question when the document has no chunks.
        """
        questions = [
            cls._question(
                quiz_type,
                f'Based on page {chunk.page_number}, what is discussed in the following '
                f'content: "{chunk.text[:100]}..."?',
                ["Fundamental concepts", "Mathematical formulas", "Practical applications", "All of the above"],
                "All of the above",
                "Please refer to the specific content on this page for detailed information.",
                f"This question is based on content from page {chunk.page_number}. "
                "Review the material carefully to understand the concepts.",
                chunk.page_number,
            )
            for chunk in list(chunks)[:max(question_count, 0)]
        ]

        if questions:
            return questions

        return [
            cls._question(
                quiz_type,
                "What is the main subject of this educational material?",
                ["Science", "Mathematics", "Literature", "General Knowledge"],
                "Science",
                "Please review the content to identify the main subject.",
                "This is a content-based question. AI quota exceeded - questions "
                "generated from PDF content.",
                1,
            )
        ]
