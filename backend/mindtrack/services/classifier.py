# thought-pattern classifier: langchain + gemini cbt rater
# given situation / emotion / thought, names the cognitive distortion and
# suggests a challenge question and a reframed thought
#
# pipeline:
#   1. fill the cbt rater prompt with the user's triple
#   2. one atomic gemini call (no streaming)
#   3. parse the json body into a ThoughtDiagnosis
#
# every failure (missing key, network, timeout, bad json) becomes ClassificationFailed

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError as PydanticValidationError

from mindtrack.config import settings
from mindtrack.errors import ClassificationFailed
from mindtrack.models.cbt import ThoughtDiagnosis

logger = logging.getLogger(__name__)


CBT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are a trained cognitive behavioral therapist. Your goal is to help the user
identify distorted thought patterns, challenge them, and reframe them.
Be empathetic, supportive, and educational.

Analyze the situation, emotion, and thought provided by the user and respond with
ONLY a JSON object with exactly these keys:
{{
  "thoughtPattern": "the cognitive distortion (e.g. Catastrophizing, Black & White Thinking, Mind Reading)",
  "patternExplanation": "a brief explanation of how this thought exemplifies the pattern",
  "challenge": "a gentle, evidence-based question that challenges the thought",
  "reframe": "a more balanced alternative perspective, written in the first person"
}}"""),
    ("human", """Situation: {situation}
Emotion: {emotion}
Thought: {thought}"""),
])


@dataclass(frozen=True)
class ClassificationOutcome:
    """result of a classification attempt: a diagnosis or an error message, never both"""
    diagnosis: Optional[ThoughtDiagnosis] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.diagnosis is not None

    @classmethod
    def success(cls, diagnosis: ThoughtDiagnosis) -> "ClassificationOutcome":
        return cls(diagnosis=diagnosis)

    @classmethod
    def failure(cls, error: str) -> "ClassificationOutcome":
        return cls(error=error)


class ThoughtClassifier:
    """llm-backed cognitive distortion classifier"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.timeout = settings.CLASSIFIER_TIMEOUT_SECONDS if timeout is None else timeout
        self._chain = None

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def get_chain(self):
        """get or create the prompt | gemini | json chain"""
        if self._chain is None:
            llm = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=self.api_key,
                temperature=settings.CLASSIFIER_TEMPERATURE,
                max_output_tokens=settings.CLASSIFIER_MAX_OUTPUT_TOKENS,
            )
            self._chain = CBT_PROMPT | llm | JsonOutputParser()
        return self._chain

    async def classify(self, situation: str, emotion: str, thought: str) -> ThoughtDiagnosis:
        """run one classification, raises ClassificationFailed on any failure"""
        if not self.available:
            logger.error("Classification requested but GEMINI_API_KEY is not configured")
            raise ClassificationFailed()

        try:
            chain = self.get_chain()
            raw = await asyncio.wait_for(
                chain.ainvoke({
                    "situation": situation,
                    "emotion": emotion,
                    "thought": thought,
                }),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Classification timed out after {self.timeout}s")
            raise ClassificationFailed() from e
        except Exception as e:
            logger.warning(f"Classification call failed: {e}")
            raise ClassificationFailed() from e

        if not isinstance(raw, dict):
            logger.warning(f"Classifier returned non-object output: {type(raw).__name__}")
            raise ClassificationFailed()

        try:
            diagnosis = ThoughtDiagnosis.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Classifier output missing required fields: {e.error_count()} errors")
            raise ClassificationFailed() from e

        logger.info(f"Thought classified as: {diagnosis.thought_pattern}")
        return diagnosis

    async def try_classify(self, situation: str, emotion: str, thought: str) -> ClassificationOutcome:
        """result-style variant of classify, never raises"""
        try:
            diagnosis = await self.classify(situation, emotion, thought)
        except ClassificationFailed as e:
            return ClassificationOutcome.failure(e.message)
        return ClassificationOutcome.success(diagnosis)


# singleton instance
classifier = ThoughtClassifier()


async def get_classifier() -> ThoughtClassifier:
    """dependency injection for classifier access"""
    return classifier
