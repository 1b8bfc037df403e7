"""Remote question classification and suggestion generation via ChatGPT."""

import json
import logging
import re
from typing import Optional

import aiohttp
from pydantic import ValidationError

from ..models.questions import ClassificationResult, QuestionType

logger = logging.getLogger(__name__)


class RemoteCallError(Exception):
    """The remote model returned an error or an unusable response."""


CLASSIFY_PROMPT = """You are listening to a live job interview on behalf of the candidate.
Decide whether the following utterance from the interviewer is a question the candidate should answer.

Utterance: "{sentence}"

Respond with JSON only, using exactly these keys:
- "isQuestion": true or false
- "confidence": integer 0-100, how sure you are
- "type": one of {types}
- "refinedText": the question rewritten as a clean, self-contained question (fix transcription errors)
"""

SUGGESTION_PROMPT = """You are an interview copilot helping a candidate answer in real time.

## Candidate Context
{profile_context}

## Question ({question_type})
{question}

## Task
Give the candidate a concise answer outline they can glance at while speaking:
- Start with a one-sentence direct answer.
- Then 3-5 short bullet points with concrete talking points from their background.
- For behavioral questions, follow the STAR structure (Situation, Task, Action, Result).
Keep it under 150 words.
"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def parse_classification(text: str) -> ClassificationResult:
    """Parse the classifier's JSON reply, tolerating markdown code fences."""
    cleaned = _CODE_FENCE.sub("", text.strip())
    try:
        return ClassificationResult.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as e:
        raise RemoteCallError(f"Malformed classification response: {e}") from e


class ChatGPTEngine:
    """Simple engine for sending prompts to ChatGPT and getting responses."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout_seconds: float = 8.0):
        """Initialize ChatGPT engine.

        Args:
            api_key: OpenAI API key
            model: ChatGPT model to use
            timeout_seconds: Total time allowed for one request
        """
        if not api_key:
            raise ValueError("OpenAI API key is required")
        self.api_key = api_key
        self.model = model
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.base_url = "https://api.openai.com/v1/chat/completions"

        logger.info(f"ChatGPTEngine initialized with model: {model}")

    async def send_prompt(self,
                          prompt: str,
                          temperature: float = 0.3,
                          max_tokens: int = 500,
                          json_response: bool = False) -> str:
        """Send a prompt to ChatGPT and get the response text.

        Raises:
            RemoteCallError: If the API answers with a non-200 status
            aiohttp.ClientError, asyncio.TimeoutError: On transport failures
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        data = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            "temperature": temperature,
            "max_tokens": max_tokens
        }
        if json_response:
            data["response_format"] = {"type": "json_object"}

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.base_url, headers=headers, json=data) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RemoteCallError(f"ChatGPT API error: {response.status} - {error_text}")

                result = await response.json()
                return result["choices"][0]["message"]["content"].strip()


class ChatGPTQuestionClassifier:
    """Remote classifier: sentence -> ClassificationResult."""

    def __init__(self, engine: ChatGPTEngine):
        self.engine = engine

    async def __call__(self, sentence: str) -> ClassificationResult:
        types = ", ".join(f'"{t.value}"' for t in QuestionType)
        prompt = CLASSIFY_PROMPT.format(sentence=sentence.replace('"', "'"), types=types)
        reply = await self.engine.send_prompt(prompt, temperature=0.0, max_tokens=200, json_response=True)
        result = parse_classification(reply)
        logger.debug(f"Remote classification: question={result.is_question} "
                     f"confidence={result.confidence} type={result.question_type}")
        return result


class ChatGPTSuggestionGenerator:
    """Remote generator: (question, type, profile context) -> suggestion text."""

    def __init__(self, engine: ChatGPTEngine):
        self.engine = engine

    async def __call__(self, question_text: str, question_type: QuestionType,
                       profile_context: Optional[str] = None) -> str:
        prompt = SUGGESTION_PROMPT.format(
            profile_context=profile_context or "No profile provided.",
            question_type=question_type.value,
            question=question_text,
        )
        return await self.engine.send_prompt(prompt, temperature=0.4, max_tokens=400)
