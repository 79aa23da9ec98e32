"""Tests for FAQ cache matching."""

from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from app.models import WellnessFaq
from app.services.utils.faq import (
    CacheHit,
    CacheMiss,
    load_active_faqs,
    match_faq,
    record_faq_hit,
    score_entry,
)


def make_entry(entry_id: str, keywords: list[str], is_active: bool = True):
    return SimpleNamespace(
        id=entry_id,
        answer=f"answer {entry_id}",
        keywords=keywords,
        is_active=is_active,
    )


class TestScoreEntry:
    """Test keyword scoring."""

    def test_exact_word_counts_double(self):
        message = "i feel a flutter"
        score, matched = score_entry(message, set(message.split()), ["flutter"])
        assert score == 14
        assert matched == ["flutter"]

    def test_substring_counts_length(self):
        message = "palpitations at night"
        score, matched = score_entry(message, set(message.split()), ["palpitation"])
        assert score == 11
        assert matched == ["palpitation"]

    def test_keyword_case_is_ignored(self):
        message = "caffeine and skipped beats"
        score, matched = score_entry(message, set(message.split()), ["Caffeine"])
        assert score == 16
        assert matched == ["caffeine"]


class TestMatchFaq:
    """Test choosing a cached answer."""

    def test_flutter_after_dinner_hits(self):
        entry = make_entry("flutter", ["eating", "flutter", "vagus"])

        result = match_faq("I feel a flutter after eating dinner", [entry])

        assert isinstance(result, CacheHit)
        assert result.entry is entry
        assert result.answer == "answer flutter"
        assert result.score == 2 * (len("eating") + len("flutter"))
        assert sorted(result.matched_keywords) == ["eating", "flutter"]

    def test_single_short_substring_misses(self):
        entry = make_entry("palp", ["palpit"])
        assert isinstance(match_faq("Palpitations keep me awake", [entry]), CacheMiss)

    def test_single_long_substring_at_floor_misses(self):
        # 15 characters, substring only: score 15 is not above the floor
        entry = make_entry("supp", ["supplementation"])
        assert isinstance(match_faq("supplementations for the heart", [entry]), CacheMiss)

    def test_single_long_exact_word_hits(self):
        entry = make_entry("mag", ["magnesium"])
        result = match_faq("should I take magnesium daily", [entry])
        assert isinstance(result, CacheHit)
        assert result.score == 18

    def test_two_short_matches_hit(self):
        entry = make_entry("tea", ["tea", "caf"])
        result = match_faq("is green tea with caffeine ok", [entry])
        assert isinstance(result, CacheHit)
        assert result.score == 6 + 3

    def test_inactive_entries_are_ignored(self):
        entry = make_entry("off", ["eating", "flutter"], is_active=False)
        assert isinstance(match_faq("a flutter after eating", [entry]), CacheMiss)

    def test_highest_score_wins(self):
        weak = make_entry("weak", ["sleep", "night"])
        strong = make_entry("strong", ["sleep", "lying", "down"])

        result = match_faq("beats when lying down to sleep at night", [weak, strong])

        assert result.entry is strong

    def test_tie_goes_to_first_entry(self):
        first = make_entry("first", ["stress", "beats"])
        second = make_entry("second", ["beats", "stress"])

        result = match_faq("stress beats", [first, second])

        assert result.entry is first

    def test_no_entries(self):
        assert isinstance(match_faq("anything", []), CacheMiss)

    def test_deterministic(self):
        entries = [
            make_entry("a", ["coffee", "beats"]),
            make_entry("b", ["exercise", "beats"]),
        ]
        message = "skipped beats after coffee and exercise"

        first = match_faq(message, entries)
        second = match_faq(message, entries)

        assert first == second

    @pytest.mark.parametrize("message", ["", "   ", "hello"])
    def test_no_keywords_present(self, message):
        entry = make_entry("flutter", ["eating", "flutter"])
        assert isinstance(match_faq(message, [entry]), CacheMiss)


class TestFaqPersistence:
    """Test loading entries and counting hits."""

    def test_load_active_only(self, session: Session, flutter_faq: WellnessFaq):
        inactive = WellnessFaq(
            question="Old question",
            answer="Old answer",
            keywords=["old"],
            is_active=False,
        )
        session.add(inactive)
        session.commit()

        faqs = load_active_faqs(session)

        assert [f.id for f in faqs] == [flutter_faq.id]

    def test_record_hit(self, session: Session, flutter_faq: WellnessFaq):
        record_faq_hit(session, flutter_faq.id)
        record_faq_hit(session, flutter_faq.id)

        session.expire_all()
        assert session.get(WellnessFaq, flutter_faq.id).hit_count == 2
