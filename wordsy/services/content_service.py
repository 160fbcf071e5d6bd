# wordsy/services/content_service.py
import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from wordsy.config import settings
from wordsy.core.exceptions import ContentGenerationError

logger = logging.getLogger(__name__)

QUIZ_TYPES = ["standard", "vocabulary", "grammar", "pronunciation"]

CHAT_MAX_WORDS = 20

QUIZ_TYPE_FOCUS = {
    "standard": "Mixed questions covering meaning, usage and context",
    "vocabulary": "Focus on word meanings and usage",
    "grammar": "Practice with sentence construction; prefer fillInBlank questions",
    "pronunciation": "Audio and speech questions; prefer audio questions with an audioText field",
}

LANGUAGE_NAMES = {
    "tr": "Turkish",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
}


def language_display_name(code: Optional[str]) -> str:
    """Human readable language name for an ISO code or English name"""
    if not code:
        return "English"
    key = code.strip().lower()
    if key in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[key]
    for name in LANGUAGE_NAMES.values():
        if name.lower() == key:
            return name
    return code.strip().capitalize()


def parse_json_content(content: str) -> Any:
    """Parse model output as JSON, falling back to the first object or array block"""
    text = content.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"(\{.*\}|\[.*\])", text, re.DOTALL)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                pass
    raise ContentGenerationError("Generator returned invalid JSON")


class ContentGenerator:
    """Thin OpenAI client for quizzes, example sentences, translations, word info and chat"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Optional[OpenAI] = None):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ContentGenerationError("OpenAI API key is not configured")
            self._client = OpenAI(api_key=self.api_key, timeout=settings.openai_timeout_seconds)
        return self._client

    def _chat(self, system: str, prompt: str, temperature: float, max_tokens: Optional[int] = None) -> str:
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]
        return self._complete(messages, temperature, max_tokens)

    def _complete(self, messages: List[Dict[str, str]], temperature: float, max_tokens: Optional[int] = None) -> str:
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            request["max_tokens"] = max_tokens

        try:
            response = self.client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.error(f"❌ OpenAI request failed: {str(e)}")
            raise ContentGenerationError(f"Content generation failed: {str(e)}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise ContentGenerationError("No content in generator response")
        return response.choices[0].message.content

    # ================================
    # QUIZ QUESTIONS
    # ================================

    def generate_quiz_questions(
        self,
        words: List[Dict[str, Any]],
        quiz_type: str = "standard",
        language: str = "en",
        group_name: str = "",
        group_description: str = "",
        question_count: int = 10,
    ) -> List[Dict[str, Any]]:
        """Raw question payloads; validation is left to the quiz builder"""
        language_name = language_display_name(language)
        group_context = ""
        if group_name:
            group_context = (
                f'These words belong to a group called "{group_name}" with description: '
                f'"{group_description}". Make the questions thematically connected to this context.'
            )

        prompt = f"""
Generate a vocabulary quiz with {question_count} questions for these words:

{json.dumps(words, ensure_ascii=False, indent=2)}

{group_context}

Quiz focus: {QUIZ_TYPE_FOCUS.get(quiz_type, QUIZ_TYPE_FOCUS["standard"])}

Generate all content in {language_name}. Only definitions may stay in their original language.

Rules:
- multipleChoice and fillInBlank questions MUST have exactly 4 options
- "correctAnswer" MUST match exactly one of the options
- dragAndDrop questions carry "matchPairs": [{{"term": "...", "definition": "..."}}]
- fillInBlank questions carry a "sentence" with ___ in place of the answer
- If fewer than {question_count} words, create multiple questions per word
- Include 3 relevant emojis per question in "questionEmojis"

Return ONLY valid JSON (no markdown):
{{
  "questions": [
    {{
      "type": "multipleChoice",
      "question": "Question text here",
      "correctAnswer": "The correct answer",
      "options": ["Option 1", "Option 2", "The correct answer", "Option 4"],
      "questionEmojis": "🐶😜👊"
    }}
  ]
}}
"""
        content = self._chat(
            system="You are an expert language teacher creating engaging themed vocabulary quizzes.",
            prompt=prompt,
            temperature=0.8,
        )
        data = parse_json_content(content)

        if isinstance(data, dict):
            data = data.get("questions", [])
        if not isinstance(data, list):
            raise ContentGenerationError("Quiz response has no question list")

        logger.info(f"🧠 Generated {len(data)} raw quiz questions ({quiz_type}, {language})")
        return data

    # ================================
    # EXAMPLE SENTENCES
    # ================================

    def generate_example_sentences(
        self,
        word: str,
        group_name: str = "",
        group_description: str = "",
        language: str = "",
        count: int = 5,
    ) -> List[Dict[str, str]]:
        language_name = language_display_name(language)
        context = f' in contexts related to "{group_name}": "{group_description}"' if group_name else ""

        prompt = f"""
Write {count} {language_name} sentences using the word "{word}"{context}.
Use the word naturally with a mix of difficulty levels and tenses.

Return ONLY valid JSON (no markdown):
{{
  "sentences": [
    {{"text": "The sentence here", "difficulty": "easy|medium|hard"}}
  ]
}}
"""
        content = self._chat(
            system="You generate contextually relevant example sentences in multiple languages.",
            prompt=prompt,
            temperature=0.7,
        )
        data = parse_json_content(content)
        items = data.get("sentences", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ContentGenerationError("Sentence response has no sentence list")

        sentences = []
        for item in items:
            if isinstance(item, dict) and isinstance(item.get("text"), str) and item["text"].strip():
                difficulty = item.get("difficulty")
                if difficulty not in ("easy", "medium", "hard"):
                    difficulty = "medium"
                sentences.append({"text": item["text"].strip(), "difficulty": difficulty})
        return sentences

    # ================================
    # TRANSLATION & WORD INFO
    # ================================

    def translate(self, text: str, target_language: str) -> str:
        prompt = (
            f"Translate the following text to {language_display_name(target_language)}. "
            f"Return only the translation.\n\n{text}"
        )
        content = self._chat(
            system="You are a helpful language assistant that provides translations.",
            prompt=prompt,
            temperature=0.7,
            max_tokens=300,
        )
        return content.strip()

    def get_word_info(self, word: str, source_language: str = "", translate_language: str = "en") -> Dict[str, str]:
        """Word type, short meaning and translation of a word"""
        target = language_display_name(translate_language)
        if source_language:
            source = language_display_name(source_language)
            intro = f'The word "{word}" is in {source}.'
            meaning_language = source
        else:
            intro = f'Analyze the word "{word}" and determine its language.'
            meaning_language = "the original language of the word"

        prompt = f"""
{intro} Provide:
1. Its most common word type (noun, verb, adjective, adverb, or other)
2. A short clear meaning in {meaning_language}
3. A translation to {target}

Return ONLY valid JSON:
{{"type": "noun|verb|adjective|adverb|other", "meaning": "...", "translation": "..."}}
"""
        content = self._chat(
            system="You are a multilingual language assistant that provides word information and translations.",
            prompt=prompt,
            temperature=0.3,
        )
        data = parse_json_content(content)
        if not isinstance(data, dict):
            raise ContentGenerationError("Word info response is not an object")

        return {
            "type": str(data.get("type", "other")).strip().lower(),
            "meaning": str(data.get("meaning", "")).strip(),
            "translation": str(data.get("translation", "")).strip(),
        }

    # ================================
    # CONVERSATION PRACTICE
    # ================================

    def chat(self, messages: List[Dict[str, str]], language: str) -> str:
        """
        Short practice reply to a conversation held in `language`.

        `messages` is the history as {"role": "user" | "assistant", "content": ...}
        dicts, oldest first. A reply longer than CHAT_MAX_WORDS is requested
        once more under a stricter instruction and a smaller token budget.
        """
        language_name = language_display_name(language)
        system = (
            f"You are a helpful language practice assistant. You MUST follow these strict rules: "
            f"1) ONLY respond in {language_name}. 2) Keep ALL responses under {CHAT_MAX_WORDS} words. "
            f"3) NEVER use any other language than {language_name}."
        )
        reply = self._complete([{"role": "system", "content": system}] + messages, temperature=0.7, max_tokens=100)
        if len(reply.split()) <= CHAT_MAX_WORDS:
            return reply.strip()

        logger.info(f"✂️ Chat reply ran to {len(reply.split())} words, asking again")
        strict = (
            f"CRITICAL INSTRUCTION: You are a language practice assistant that MUST follow these rules EXACTLY: "
            f"1) ONLY respond in {language_name}. 2) Your response MUST be UNDER {CHAT_MAX_WORDS} WORDS. "
            f"3) Keep responses extremely brief. 4) NEVER explain or apologize about length restrictions."
        )
        reply = self._complete([{"role": "system", "content": strict}] + messages, temperature=0.7, max_tokens=60)
        return reply.strip()


content_generator = ContentGenerator()


def get_content_generator() -> ContentGenerator:
    """FastAPI dependency, overridden in tests"""
    return content_generator
