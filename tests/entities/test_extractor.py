import pytest

from life_parser.entities.extractor import EntityExtractor
from life_parser.entities.types import (
    AmountEntity,
    Context,
    DirectionEntity,
    DurationEntity,
    ResolvedEntity,
    entity_to_dict,
)

_MOVE_VERBS = ["go", "walk", "move", "visit"]
_TALK_VERBS = ["talk", "speak", "chat"]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("borrow $5,000", 5000),
        ("borrow 5000", 5000),
        ("borrow 5k", 5000),
        ("borrow 2.5K please", 2500),
        ("i need 2m for the factory", 2_000_000),
        ("borrow 10000 dollars", 10000),
        ("wait 5 minutes then borrow 300", 5),
        ("loan of 0 then 12", 12),
    ],
)
def test_amount_forms(text: str, expected: int) -> None:
    assert EntityExtractor().extract("amount", text) == AmountEntity(value=expected)


@pytest.mark.parametrize("text", ["borrow money", "loan of 0"])
def test_amount_missing(text: str) -> None:
    assert EntityExtractor().extract("amount", text) is None


@pytest.mark.parametrize(
    "text,hours,confidence",
    [
        ("rest for 8 hours", 8, 0.95),
        ("sleep 3 hrs", 3, 0.95),
        ("nap for 1 hour", 1, 0.95),
        ("sleep", 8, 0.7),
        ("time for bed", 8, 0.7),
    ],
)
def test_duration(text: str, hours: int, confidence: float) -> None:
    entity = EntityExtractor().extract("duration", text)

    assert entity == DurationEntity(hours=hours, confidence=confidence)
    assert entity.value == hours


def test_duration_missing() -> None:
    assert EntityExtractor().extract("duration", "go home") is None


@pytest.mark.parametrize(
    "text,expected",
    [("head north then east", "north"), ("climb UP", "up"), ("go west!", "west")],
)
def test_direction(text: str, expected: str) -> None:
    assert EntityExtractor().extract("direction", text) == DirectionEntity(value=expected)


@pytest.mark.parametrize("text", ["go downtown", "the northern road", "go home"])
def test_direction_requires_whole_word(text: str) -> None:
    assert EntityExtractor().extract("direction", text) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("talk to owner about rates", "rates"),
        ("ask regarding the loan terms.", "the loan terms"),
    ],
)
def test_topic(text: str, expected: str) -> None:
    assert EntityExtractor().extract("topic", text).value == expected


def test_topic_missing() -> None:
    assert EntityExtractor().extract("topic", "talk to the owner") is None


def test_target_strips_verbs_and_articles() -> None:
    extractor = EntityExtractor()

    assert extractor.extract("target", "examine the painting").value == "painting"
    assert extractor.extract("target", "check my stats").value == "stats"
    assert extractor.extract("target", "eat a sandwich", verbs=["eat"]).value == "sandwich"
    assert extractor.extract("target", "check the") is None


def test_location_exact_id(context: Context) -> None:
    entity = EntityExtractor().extract("location", "go to cafe", context, _MOVE_VERBS)

    assert entity == ResolvedEntity(
        kind="location", key="cafe", name="Coffee Bean Café", confidence=1.0
    )
    assert entity.value == "cafe"


def test_location_by_display_name(context: Context) -> None:
    entity = EntityExtractor().extract(
        "location", "walk to the central park", context, _MOVE_VERBS
    )

    assert entity.key == "city_park"
    assert entity.confidence == pytest.approx(1.0)


def test_location_name_ignores_accents(context: Context) -> None:
    entity = EntityExtractor().extract(
        "location", "visit the coffee bean cafe", context, _MOVE_VERBS
    )

    assert entity.key == "cafe"


def test_location_partial_word(context: Context) -> None:
    entity = EntityExtractor().extract("location", "walk to the park", context, _MOVE_VERBS)

    assert entity.key == "city_park"
    assert entity.confidence == pytest.approx(0.6)


def test_location_not_in_context(context: Context) -> None:
    assert EntityExtractor().extract("location", "go to the moon", context) is None


def test_character(context: Context) -> None:
    entity = EntityExtractor().extract(
        "character", "talk to the owner about rates", context, _TALK_VERBS
    )

    assert entity.key == "owner"
    assert 0.4 <= entity.confidence <= 1.0


def test_character_needs_loaded_content(content: dict) -> None:
    context = Context.coerce({"locations": content["locations"]})

    assert context.characters is None
    assert EntityExtractor().extract("character", "talk to owner", context) is None


def test_short_fragment_only_on_rescan(context: Context) -> None:
    extractor = EntityExtractor()

    assert extractor.extract("character", "talk to mar", context, _TALK_VERBS) is None
    entity = extractor.rescan("character", "talk to mar", context, _TALK_VERBS)
    assert entity.key == "maria_gonzalez"
    assert entity.confidence == pytest.approx(0.5)


@pytest.mark.parametrize("text", [None, "", "   ", 12])
def test_extract_never_raises(context: Context, text: object) -> None:
    extractor = EntityExtractor()

    for kind in ("location", "character", "amount", "duration", "direction", "topic"):
        assert extractor.extract(kind, text, context) is None


def test_unknown_kind_is_none() -> None:
    assert EntityExtractor().extract("colour", "paint it red") is None


def test_extract_all(context: Context) -> None:
    found = EntityExtractor().extract_all("rest 2 hours at the bank", context)

    assert found["location"].key == "bank"
    assert found["duration"] == DurationEntity(hours=2)
    assert "character" not in found
    assert "direction" not in found


def test_entity_to_dict() -> None:
    assert entity_to_dict(DurationEntity(hours=3)) == {
        "kind": "duration",
        "hours": 3,
        "value": 3,
        "confidence": 0.95,
    }
