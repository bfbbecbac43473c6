import json
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from google import genai

from errors import GenerationError, ParseError

logger = logging.getLogger(__name__)

BRACKETED_BLOCK_RE = re.compile(r'\[[\s\S]*\]')

PROMPT_TEMPLATE = """
Generate {num_questions} multiple-choice questions (MCQs) based on the following document content.
The questions should be of {difficulty} difficulty level.

Format:
[
  {{ "question": "Question text?", "options": ["A", "B", "C", "D"], "correctAnswer": "Correct option", "explanation": "Why it's correct" }}
]

Here is the document content:
{content}
"""


@dataclass(frozen=True)
class Question:
    question: Optional[str] = None
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            question=data.get('question'),
            options=data.get('options'),
            correct_answer=data.get('correctAnswer'),
            explanation=data.get('explanation'),
        )

    def to_dict(self):
        # fields the model left out stay out of the response
        data = {
            'question': self.question,
            'options': self.options,
            'correctAnswer': self.correct_answer,
            'explanation': self.explanation,
        }
        return {key: value for key, value in data.items() if value is not None}


def build_prompt(content, num_questions=5, difficulty='medium'):
    return PROMPT_TEMPLATE.format(
        num_questions=num_questions,
        difficulty=difficulty,
        content=content,
    )


def parse_questions(reply):
    """Parse the model's free-text reply into a list of questions.

    The payload is taken to be everything from the first ``[`` to the last
    ``]`` of the reply.
    """
    match = BRACKETED_BLOCK_RE.search(reply or '')
    if not match:
        raise ParseError('Could not parse response format from API')

    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ParseError(f'Malformed question data in API response: {exc}') from exc

    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ParseError('API response is not a list of question objects')
    return [Question.from_dict(item) for item in items]


class QuestionGenerator:
    """Sends the question prompt to Gemini and parses the reply."""

    def __init__(self, settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.settings.api_key:
                raise GenerationError('GEMINI_API_KEY is not set')
            self._client = genai.Client(api_key=self.settings.api_key)
        return self._client

    async def complete(self, prompt):
        client = self.client
        try:
            response = await client.aio.models.generate_content(
                model=self.settings.model,
                contents=prompt,
            )
        except Exception as exc:
            logger.exception('Gemini request failed')
            raise GenerationError(f'Generative API request failed: {exc}') from exc
        return response.text or ''

    async def generate(self, content, num_questions=5, difficulty='medium'):
        prompt = build_prompt(content, num_questions, difficulty)
        logger.info('Sending request to Gemini API (%s)', self.settings.model)
        reply = await self.complete(prompt)
        try:
            return parse_questions(reply)
        except ParseError:
            logger.exception('Could not parse Gemini reply: %r', reply[:500])
            raise
