"""
LLM Service: Gemini completions for chat, tutoring, flashcards, quizzes,
summaries, session analysis, study plans and mind-map suggestions.

Every public method returns a usable value. When the model call or parsing
fails, the error is logged and canned content of the same shape is returned.
"""

import base64
import json
import re
from datetime import date
from typing import Any, List, Optional, Sequence, Union

import requests
from pydantic import ValidationError

from ..config import settings
from ..models.ai import (
    ChatMessage,
    ChatReply,
    GeneratedCard,
    HistoryEntry,
    LearningPreferences,
    QuizQuestion,
    SessionAnalysis,
    SessionInfo,
    StudyPlanDraft,
    SummaryOptions,
    TaskInfo,
)
from .events import log_debug, log_event
from .fallbacks import (
    ANALYSIS_ERROR_REPLY,
    CHAT_ERROR_REPLY,
    DEFAULT_RECOMMENDATIONS,
    STUDY_HELP_ERROR_REPLY,
    TUTOR_ERROR_REPLY,
    fallback_flashcards,
    fallback_ideas,
    fallback_quiz,
    fallback_session_analysis,
    fallback_study_plan,
    fallback_summary,
)

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"

DEFAULT_EXPLANATION = "This is the correct answer based on the topic."
OPTIONS_PER_QUESTION = 4
IDEA_COUNT = 5


class GeminiError(RuntimeError):
    """The model returned no usable text."""


class GeminiService:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = settings.GEMINI_BASE_URL.rstrip("/")
        self.timeout = settings.GEMINI_TIMEOUT

    # --- Transport ---

    def _call_gemini(
        self,
        contents: Union[str, List[dict]],
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """
        Calls generateContent and returns the joined text of the first candidate.

        contents is either a plain prompt or a full Gemini contents list
        (multi-turn history or multimodal parts).
        """
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not set in environment variables")

        if isinstance(contents, str):
            contents = [{"role": "user", "parts": [{"text": contents}]}]

        payload = {
            "contents": contents,
            "safetySettings": [
                {"category": category, "threshold": SAFETY_THRESHOLD} for category in HARM_CATEGORIES
            ],
            "generationConfig": {
                "temperature": settings.GEMINI_TEMPERATURE if temperature is None else temperature,
                "maxOutputTokens": max_output_tokens or settings.GEMINI_MAX_OUTPUT_TOKENS,
            },
        }

        response = requests.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()

        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise GeminiError(f"Gemini returned no candidates ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            finish = candidates[0].get("finishReason", "unknown")
            raise GeminiError(f"Gemini returned empty text (finishReason={finish})")
        return text

    def _clean_json_response(self, content: str) -> Any:
        """Strips Markdown fences and parses JSON, falling back to the first embedded array or object."""
        content = content.strip()
        if content.startswith("```"):
            lines = content.splitlines()
            if lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].startswith("```"):
                lines = lines[:-1]
            content = "\n".join(lines)
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            for pattern in (r"\[.*\]", r"\{.*\}"):
                match = re.search(pattern, content, re.DOTALL)
                if match:
                    try:
                        return json.loads(match.group())
                    except json.JSONDecodeError:
                        continue
            raise

    def _fallback(self, operation: str, error: Exception):
        log_debug(f"[GEMINI] {operation} failed, using fallback: {error}")
        log_event("AI_FALLBACK_USED", {"operation": operation, "error": str(error)})

    # --- Conversation ---

    @staticmethod
    def _to_history(messages: Sequence[ChatMessage]) -> List[HistoryEntry]:
        return [
            HistoryEntry(role="user" if m.role == "user" else "model", parts=m.content)
            for m in messages
        ]

    @staticmethod
    def _to_contents(history: Sequence[HistoryEntry]) -> List[dict]:
        return [{"role": h.role, "parts": [{"text": h.parts}]} for h in history]

    def chat_response(
        self,
        messages: Sequence[ChatMessage],
        history: Optional[Sequence[HistoryEntry]] = None,
    ) -> ChatReply:
        """Replies to the last message, carrying prior turns as history."""
        if not messages:
            return ChatReply(text="", history=list(history or []))

        prior = list(history) if history is not None else self._to_history(messages[:-1])
        turn = HistoryEntry(role="user", parts=messages[-1].content)
        try:
            text = self._call_gemini(self._to_contents(prior + [turn]))
            return ChatReply(text=text, history=prior + [turn, HistoryEntry(role="model", parts=text)])
        except Exception as e:
            self._fallback("chat_response", e)
            return ChatReply(text=CHAT_ERROR_REPLY, history=prior + [turn], is_fallback=True)

    def _tutor_prompt(self, subject: str, topic: str, preferences: LearningPreferences) -> str:
        lines = [
            f"You are an expert tutor in {subject}, currently teaching {topic}.",
            f"The student is at a {preferences.difficulty} level and prefers a {preferences.learning_style} learning style.",
            f"Keep explanations suitable for a {preferences.session_duration}-minute study session.",
        ]
        if preferences.include_examples:
            lines.append("Include concrete examples to illustrate concepts.")
        if preferences.include_practice_questions:
            lines.append("End with a short practice question to check understanding.")
        if preferences.explain_in_depth:
            lines.append("Explain concepts in depth, covering the reasoning behind each step.")
        else:
            lines.append("Keep explanations focused and concise.")
        lines.append("Be encouraging and patient.")
        return "\n".join(lines)

    def tutor_response(
        self,
        messages: Sequence[ChatMessage],
        subject: str,
        topic: str,
        preferences: Optional[LearningPreferences] = None,
    ) -> ChatReply:
        preferences = preferences or LearningPreferences()
        system = self._tutor_prompt(subject, topic, preferences)
        history = self._to_history(messages)
        # System prompt travels as a leading user/model exchange
        primer = [
            HistoryEntry(role="user", parts=system),
            HistoryEntry(role="model", parts=f"Understood. I'm ready to help you learn {topic}."),
        ]
        try:
            text = self._call_gemini(self._to_contents(primer + history))
            return ChatReply(text=text, history=history + [HistoryEntry(role="model", parts=text)])
        except Exception as e:
            self._fallback("tutor_response", e)
            return ChatReply(text=TUTOR_ERROR_REPLY, history=history, is_fallback=True)

    def study_help(self, query: str, context: Optional[str] = None) -> str:
        prompt = "You are a helpful study assistant. Answer the student's question clearly and accurately.\n\n"
        if context:
            prompt += f"Context from the student's material:\n{context}\n\n"
        prompt += f"Question: {query}\n\nExplain step by step where it helps, and suggest how to remember the key points."
        try:
            return self._call_gemini(prompt)
        except Exception as e:
            self._fallback("study_help", e)
            return STUDY_HELP_ERROR_REPLY

    def analyze_text(self, text: str) -> str:
        prompt = f"""Analyze the following study material. Identify the main ideas, key terms and
how they relate, and point out anything that deserves extra review.

Text:
{text}"""
        try:
            return self._call_gemini(prompt)
        except Exception as e:
            self._fallback("analyze_text", e)
            return ANALYSIS_ERROR_REPLY

    # --- Flashcards ---

    def _flashcard_prompt(self, count: int, source: str) -> str:
        return f"""Create {count} flashcards from {source}.

Return ONLY a JSON array, no markdown formatting, no explanations:
[{{"question": "...", "answer": "..."}}]"""

    def _parse_cards(self, response_text: str) -> List[GeneratedCard]:
        data = self._clean_json_response(response_text)
        if not isinstance(data, list):
            raise ValueError("Expected a JSON array of flashcards")
        cards = [GeneratedCard.model_validate(item) for item in data]
        cards = [c for c in cards if c.question.strip() and c.answer.strip()]
        if not cards:
            raise ValueError("Model returned no usable flashcards")
        return cards

    def generate_flashcards(self, content: str, n: int = 5) -> List[GeneratedCard]:
        n = max(1, n)
        prompt = self._flashcard_prompt(n, f"this content:\n\n{content}\n\n")
        try:
            return self._parse_cards(self._call_gemini(prompt))[:n]
        except Exception as e:
            self._fallback("generate_flashcards", e)
            return fallback_flashcards(n)

    def generate_flashcards_from_file(self, data: bytes, mime_type: str, n: int = 5) -> List[GeneratedCard]:
        """Sends the file inline (base64) alongside the instruction."""
        n = max(1, n)
        contents = [{
            "role": "user",
            "parts": [
                {"inlineData": {"mimeType": mime_type, "data": base64.b64encode(data).decode("ascii")}},
                {"text": self._flashcard_prompt(n, "the attached document")},
            ],
        }]
        try:
            return self._parse_cards(self._call_gemini(contents))[:n]
        except Exception as e:
            self._fallback("generate_flashcards_from_file", e)
            return fallback_flashcards(n)

    # --- Summaries ---

    def summarize_text(self, text: str, options: Optional[SummaryOptions] = None) -> str:
        options = options or SummaryOptions()
        length_hint = {
            "short": "2-3 sentences",
            "medium": "one paragraph",
            "long": "several paragraphs",
        }[options.length]
        style_hint = {
            "concise": "Be concise and direct.",
            "detailed": "Include important details and supporting points.",
            "bullets": "Format the summary as bullet points starting with '• '.",
        }[options.style]
        prompt = f"""Summarize the following text in {length_hint}. {style_hint}

Text:
{text}"""
        try:
            return self._call_gemini(prompt).strip()
        except Exception as e:
            self._fallback("summarize_text", e)
            return fallback_summary(text, options)

    # --- Quizzes ---

    @staticmethod
    def _normalize_question(raw: QuizQuestion, filler: QuizQuestion) -> QuizQuestion:
        """Four options, correct answer among them, explanation present."""
        options = [o for o in raw.options if isinstance(o, str) and o.strip()][:OPTIONS_PER_QUESTION]
        for option in filler.options:
            if len(options) >= OPTIONS_PER_QUESTION:
                break
            if option not in options:
                options.append(option)
        while len(options) < OPTIONS_PER_QUESTION:
            options.append(f"Option {len(options) + 1}")

        correct = raw.correct_answer if raw.correct_answer in options else options[0]
        return QuizQuestion(
            question=raw.question,
            options=options,
            correct_answer=correct,
            explanation=raw.explanation or DEFAULT_EXPLANATION,
        )

    def generate_quiz(self, topic: str, difficulty: str = "medium", n: int = 5) -> List[QuizQuestion]:
        """
        Returns exactly n questions (n clamped to 1..QUIZ_MAX_QUESTIONS).

        Short or partially invalid model output is padded from the canned
        question table.
        """
        n = min(max(1, n), settings.QUIZ_MAX_QUESTIONS)
        filler = fallback_quiz(topic, n)
        prompt = f"""Create a {difficulty} difficulty multiple-choice quiz about "{topic}" with exactly {n} questions.

Each question must have exactly 4 options and one correct answer that matches one option verbatim.

Return ONLY a JSON array, no markdown formatting, no explanations:
[{{"question": "...", "options": ["A", "B", "C", "D"], "correctAnswer": "A", "explanation": "..."}}]"""
        try:
            data = self._clean_json_response(self._call_gemini(prompt))
            if not isinstance(data, list):
                raise ValueError("Expected a JSON array of questions")
        except Exception as e:
            self._fallback("generate_quiz", e)
            return filler

        questions: List[QuizQuestion] = []
        for item in data:
            if len(questions) >= n:
                break
            try:
                raw = QuizQuestion.model_validate(item)
            except ValidationError as e:
                log_debug(f"[GEMINI] Skipping malformed quiz question: {e}")
                continue
            if not raw.question.strip():
                continue
            questions.append(self._normalize_question(raw, filler[len(questions)]))

        if len(questions) < n:
            log_debug(f"[GEMINI] Quiz returned {len(questions)}/{n} questions, padding with fallback")
        questions.extend(filler[len(questions):n])
        return questions

    # --- Study sessions and plans ---

    def analyze_study_session(self, session: SessionInfo, task: TaskInfo) -> SessionAnalysis:
        subject = f" ({task.subject})" if task.subject else ""
        prompt = f"""A student just finished a study session.

Task: {task.title}{subject}
Duration: {session.duration} minutes
Self-rated productivity: {session.productivity}/10
Notes: {session.notes or "none"}

Return ONLY a JSON object, no markdown formatting:
{{"strengths": ["..."], "improvements": ["..."], "nextSteps": ["..."]}}"""
        try:
            data = self._clean_json_response(self._call_gemini(prompt))
            return SessionAnalysis.model_validate(data)
        except Exception as e:
            self._fallback("analyze_study_session", e)
            return fallback_session_analysis(session.duration)

    def generate_study_plan(self, syllabus: str, deadline: date, daily_hours: float) -> StudyPlanDraft:
        today = date.today()
        prompt = f"""Create a study plan from this syllabus. Today is {today.isoformat()}, the deadline is
{deadline.isoformat()}, and the student can study {daily_hours} hours per day.

Syllabus:
{syllabus}

Return ONLY a JSON object, no markdown formatting:
{{"topics": [{{"title": "...", "description": "...", "duration": 2, "priority": "high",
  "subtopics": [{{"title": "...", "duration": 30}}]}}],
 "schedule": [{{"date": "YYYY-MM-DD", "topics": ["topic title"]}}],
 "recommendations": ["..."]}}

duration of a topic is in hours, of a subtopic in minutes; priority is low, medium or high."""
        try:
            data = self._clean_json_response(self._call_gemini(prompt))
            draft = StudyPlanDraft.model_validate(data)
            if not draft.topics:
                raise ValueError("Study plan has no topics")
            return draft
        except Exception as e:
            self._fallback("generate_study_plan", e)
            return fallback_study_plan(today)

    def study_recommendations(
        self,
        completed: Sequence[str],
        in_progress: Sequence[str],
        pending: Sequence[str],
        deadline: date,
        daily_hours: float,
        progress: float,
    ) -> List[str]:
        prompt = f"""A student is following a study plan ({progress:.0f}% complete, deadline {deadline.isoformat()},
{daily_hours} hours per day).

Completed topics: {", ".join(completed) or "none"}
In progress: {", ".join(in_progress) or "none"}
Pending: {", ".join(pending) or "none"}

Give 5 short, specific recommendations. Return ONLY a JSON array of strings."""
        try:
            data = self._clean_json_response(self._call_gemini(prompt))
            recommendations = [str(r).strip() for r in data if str(r).strip()] if isinstance(data, list) else []
            if not recommendations:
                raise ValueError("No recommendations returned")
            return recommendations
        except Exception as e:
            self._fallback("study_recommendations", e)
            return list(DEFAULT_RECOMMENDATIONS)

    # --- Mind maps ---

    def suggest_ideas(self, node_text: str) -> List[str]:
        """Five short ideas related to a mind-map node."""
        prompt = f"""Suggest {IDEA_COUNT} short ideas (at most 6 words each) related to "{node_text}"
for a study mind map. Return ONLY a JSON array of strings."""
        try:
            data = self._clean_json_response(self._call_gemini(prompt))
            ideas = [str(i).strip() for i in data if str(i).strip()] if isinstance(data, list) else []
            if not ideas:
                raise ValueError("No ideas returned")
            return (ideas + fallback_ideas(node_text))[:IDEA_COUNT]
        except Exception as e:
            self._fallback("suggest_ideas", e)
            return fallback_ideas(node_text)
