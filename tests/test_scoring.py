from hanzi_overlay.core.models import Entry
from hanzi_overlay.core.scoring import TranslationScorer


def _entry(*translations: str) -> Entry:
    return Entry(script_form="字", phonetic_form="zì", translations=translations, source_list_id="test")


def test_single_translation_is_returned_without_scoring() -> None:
    assert TranslationScorer().select(_entry("water"), "anything at all") == "water"


def test_weak_evidence_falls_back_to_primary() -> None:
    scorer = TranslationScorer()

    assert scorer.select(_entry("good", "nice"), "the weather was pleasant") == "good"
    assert scorer.select(_entry("good", "nice"), "") == "good"


def test_context_words_and_categories_pick_a_meaning() -> None:
    scorer = TranslationScorer()
    context = "we went to a restaurant to eat"

    ranked = dict(scorer.score(["eat", "go"], context))

    assert ranked["eat"] - ranked["go"] >= 2
    assert scorer.select(_entry("eat", "go"), context) == "eat"


def test_category_match_can_override_primary() -> None:
    scorer = TranslationScorer()

    ranked = scorer.score(["hour", "time"], "what time is it now")

    assert ranked == [("time", 6.5), ("hour", 3.5)]
    assert scorer.select(_entry("hour", "time"), "what time is it now") == "time"


def test_zero_top_score_falls_back_to_primary() -> None:
    entry = _entry("a rather long phrase", "another long phrase")

    assert TranslationScorer().score(entry.translations, "nothing here")[0][1] == 0
    assert TranslationScorer().select(entry, "nothing here") == "a rather long phrase"


def test_length_and_single_word_bonuses() -> None:
    ranked = dict(TranslationScorer().score(["cat", "small house", "extraordinary"], ""))

    assert ranked == {"cat": 1.5, "small house": 0.0, "extraordinary": 0.5}


def test_category_keyword_must_be_a_whole_word() -> None:
    ranked = dict(TranslationScorer().score(["pay", "give"], "the moneybags laughed"))

    assert ranked["pay"] == ranked["give"] == 1.5
