# tests for the thought-pattern classifier: langchain chain is always mocked

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from langchain_core.runnables import RunnableLambda

from mindtrack.errors import ClassificationFailed
from mindtrack.services.classifier import CBT_PROMPT, ClassificationOutcome, ThoughtClassifier

from tests.conftest import SITUATION, EMOTION, THOUGHT


RAW_OUTPUT = {
    "thoughtPattern": "Catastrophizing",
    "patternExplanation": "Assuming the worst possible outcome.",
    "challenge": "What evidence supports that everyone will judge you?",
    "reframe": "I might stumble a little, but I've prepared and can handle it.",
}


def _classifier_with_chain(output=None, side_effect=None, timeout=1.0):
    classifier = ThoughtClassifier(api_key="test-key", model="gemini-test", timeout=timeout)
    chain = MagicMock()
    chain.ainvoke = AsyncMock(return_value=output, side_effect=side_effect)
    classifier._chain = chain
    return classifier, chain


class TestPrompt:
    """cbt rater prompt"""

    def test_prompt_includes_triple(self):
        messages = CBT_PROMPT.format_messages(situation=SITUATION, emotion=EMOTION, thought=THOUGHT)
        assert len(messages) == 2
        assert "thoughtPattern" in messages[0].content
        assert "patternExplanation" in messages[0].content
        assert SITUATION in messages[1].content
        assert EMOTION in messages[1].content
        assert THOUGHT in messages[1].content


class TestClassify:
    """classify(): success and every failure mode"""

    async def test_classify_success(self):
        classifier, chain = _classifier_with_chain(output=RAW_OUTPUT)
        diagnosis = await classifier.classify(SITUATION, EMOTION, THOUGHT)
        assert diagnosis.thought_pattern == "Catastrophizing"
        assert diagnosis.challenge == RAW_OUTPUT["challenge"]
        assert diagnosis.reframe == RAW_OUTPUT["reframe"]
        chain.ainvoke.assert_awaited_once_with({
            "situation": SITUATION,
            "emotion": EMOTION,
            "thought": THOUGHT,
        })

    async def test_missing_api_key(self):
        classifier = ThoughtClassifier(api_key="")
        assert classifier.available is False
        with patch.object(ThoughtClassifier, "get_chain") as get_chain:
            with pytest.raises(ClassificationFailed):
                await classifier.classify(SITUATION, EMOTION, THOUGHT)
            get_chain.assert_not_called()

    async def test_upstream_error(self):
        classifier, _ = _classifier_with_chain(side_effect=ConnectionError("unreachable"))
        with pytest.raises(ClassificationFailed):
            await classifier.classify(SITUATION, EMOTION, THOUGHT)

    async def test_timeout(self):
        async def never_returns(*args, **kwargs):
            await asyncio.sleep(10)

        classifier, _ = _classifier_with_chain(side_effect=never_returns, timeout=0.05)
        with pytest.raises(ClassificationFailed):
            await classifier.classify(SITUATION, EMOTION, THOUGHT)

    async def test_missing_fields(self):
        partial = {k: v for k, v in RAW_OUTPUT.items() if k != "reframe"}
        classifier, _ = _classifier_with_chain(output=partial)
        with pytest.raises(ClassificationFailed):
            await classifier.classify(SITUATION, EMOTION, THOUGHT)

    async def test_blank_field(self):
        classifier, _ = _classifier_with_chain(output={**RAW_OUTPUT, "challenge": "   "})
        with pytest.raises(ClassificationFailed):
            await classifier.classify(SITUATION, EMOTION, THOUGHT)

    async def test_non_object_output(self):
        classifier, _ = _classifier_with_chain(output=["Catastrophizing"])
        with pytest.raises(ClassificationFailed):
            await classifier.classify(SITUATION, EMOTION, THOUGHT)

    async def test_failure_message_is_generic(self):
        classifier, _ = _classifier_with_chain(side_effect=ValueError("Invalid json output: ```"))
        with pytest.raises(ClassificationFailed) as exc:
            await classifier.classify(SITUATION, EMOTION, THOUGHT)
        assert exc.value.message == "Failed to generate AI response"


class TestTryClassify:
    """result-style outcome"""

    async def test_success_outcome(self):
        classifier, _ = _classifier_with_chain(output=RAW_OUTPUT)
        outcome = await classifier.try_classify(SITUATION, EMOTION, THOUGHT)
        assert outcome.ok
        assert outcome.error is None
        assert outcome.diagnosis.pattern_explanation == RAW_OUTPUT["patternExplanation"]

    async def test_failure_outcome(self):
        classifier, _ = _classifier_with_chain(side_effect=RuntimeError("boom"))
        outcome = await classifier.try_classify(SITUATION, EMOTION, THOUGHT)
        assert not outcome.ok
        assert outcome.diagnosis is None
        assert outcome.error

    def test_outcome_constructors(self):
        assert ClassificationOutcome.failure("nope").ok is False


class TestChain:
    """chain construction"""

    def test_chain_built_once(self):
        classifier = ThoughtClassifier(api_key="test-key", model="gemini-test")
        with patch("mindtrack.services.classifier.ChatGoogleGenerativeAI") as llm_cls:
            llm_cls.return_value = RunnableLambda(lambda prompt: prompt)
            first = classifier.get_chain()
            second = classifier.get_chain()
        assert first is second
        llm_cls.assert_called_once()
        assert llm_cls.call_args.kwargs["model"] == "gemini-test"
        assert llm_cls.call_args.kwargs["google_api_key"] == "test-key"
