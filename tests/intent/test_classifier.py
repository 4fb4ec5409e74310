import pytest

from life_parser.intent.classifier import IntentClassifier
from life_parser.intent.registry import VocabularyRegistry, default_vocabulary
from life_parser.intent.types import UNKNOWN_INTENT

_REGISTRY = default_vocabulary()
_KEYWORDS = [
    (name, keyword) for name, definition in _REGISTRY for keyword in definition.keywords
]


@pytest.mark.parametrize("intent,keyword", _KEYWORDS)
def test_single_keyword_is_confident(intent: str, keyword: str) -> None:
    result = IntentClassifier(_REGISTRY).classify(keyword)

    assert result.intent == intent
    assert result.confidence >= 0.9


def test_single_keyword_ignores_case_and_whitespace() -> None:
    result = IntentClassifier(_REGISTRY).classify("   LOOK  ")

    assert result.intent == "look"
    assert result.confidence == pytest.approx(0.95)


def test_keyword_pattern_and_start_bonus() -> None:
    # (1.0 keyword + 0.5 pattern + 0.3 start) / (2 * 0.5 + 1) * 5 / 10
    result = IntentClassifier(_REGISTRY).classify("look around")

    assert result.intent == "look"
    assert result.confidence == pytest.approx(0.45)


def test_talk_sentence_beats_move_on_shared_pattern() -> None:
    result = IntentClassifier(_REGISTRY).classify("talk to the owner about rates")

    assert result.intent == "talk"
    assert result.confidence == pytest.approx(0.45)


def test_below_threshold_is_unknown() -> None:
    classifier = IntentClassifier(_REGISTRY)

    scores = classifier.scores("juggle the oranges")
    result = classifier.classify("juggle the oranges")

    assert scores and scores[0].confidence < 0.3
    assert result.intent == UNKNOWN_INTENT
    assert result.confidence == 0.0


def test_no_candidates_is_unknown() -> None:
    classifier = IntentClassifier(_REGISTRY)

    assert classifier.scores("xyzzy") == []
    assert classifier.classify("xyzzy").intent == UNKNOWN_INTENT


@pytest.mark.parametrize(
    "text",
    [
        "",
        "go",
        "go go go go",
        "take a loan for 5000 to open a cafe",
        "look look look look look around at the room",
        "show my stats please",
        "?",
    ],
)
def test_confidence_is_bounded(text: str) -> None:
    result = IntentClassifier(_REGISTRY).classify(text)

    assert 0.0 <= result.confidence <= 1.0
    if result.intent == UNKNOWN_INTENT:
        assert result.confidence == 0.0


def test_tie_prefers_higher_priority() -> None:
    registry = VocabularyRegistry(
        {
            "alpha": {"keywords": ["zap"], "priority": 5},
            "beta": {"keywords": ["zap"], "priority": 9},
        }
    )

    result = IntentClassifier(registry).classify("zap")

    assert result.intent == "beta"
    assert result.confidence == pytest.approx(0.95)


def test_tie_with_equal_priority_is_lexicographic() -> None:
    registry = VocabularyRegistry(
        {
            "zeta": {"keywords": ["zap"], "priority": 7},
            "alpha": {"keywords": ["zap"], "priority": 7},
        }
    )

    result = IntentClassifier(registry).classify("zap it now")

    assert result.intent == "alpha"


def test_priority_scales_multi_word_confidence() -> None:
    registry = VocabularyRegistry(
        {
            "low": {"keywords": ["ping"], "priority": 2},
            "high": {"keywords": ["pong"], "priority": 10},
        }
    )
    classifier = IntentClassifier(registry)

    low = classifier.score("ping it", "low", registry.get("low"))
    high = classifier.score("pong it", "high", registry.get("high"))

    assert low is not None and high is not None
    assert low.confidence == pytest.approx(0.13)
    assert high.confidence == pytest.approx(0.65)
