"""
Tests for the Indexer

Covers LLM analysis parsing, local keyword extraction, trigger syntax and
the outcome events.
"""

import json

import pytest


ANALYSIS = json.dumps({
    "keywords": ["Fox", "jumping"],
    "themes": ["animals", "fox"],
    "entities": ["Fox"],
    "summary": "A fox jumps over a dog.",
})


class TestLocalExtraction:
    """Tests for extract_keywords_locally"""

    def test_pangram_keywords(self):
        from autoagent.indexer import extract_keywords_locally

        keywords = extract_keywords_locally("The quick brown fox jumps over the lazy dog")

        assert keywords == ["quick", "brown", "jumps", "over", "lazy"]
        # three-letter words are dropped
        assert "fox" not in keywords
        assert "dog" not in keywords
        assert "the" not in keywords

    def test_ranked_by_frequency_with_first_seen_ties(self):
        from autoagent.indexer import extract_keywords_locally

        text = "beta alpha gamma alpha beta alpha delta"
        assert extract_keywords_locally(text) == ["alpha", "beta", "gamma", "delta"]

    def test_punctuation_and_case_stripped(self):
        from autoagent.indexer import extract_keywords_locally

        keywords = extract_keywords_locally("Python! python, PYTHON's snake_case (rocks).")

        assert keywords[0] == "python"
        assert "pythons" in keywords
        assert "snakecase" in keywords
        assert "rocks" in keywords

    def test_top_ten_only(self):
        from autoagent.indexer import extract_keywords_locally

        text = " ".join(f"word{i:02d}" for i in range(15))
        keywords = extract_keywords_locally(text)

        assert len(keywords) == 10
        assert keywords[0] == "word00"

    def test_empty_content(self):
        from autoagent.indexer import extract_keywords_locally

        assert extract_keywords_locally("") == []
        assert extract_keywords_locally("a an the of") == []


class TestParseAnalysis:
    """Tests for parse_analysis"""

    def test_keywords_themes_entities_concatenated(self):
        from autoagent.indexer import parse_analysis

        analysis = parse_analysis(ANALYSIS)

        assert analysis.combined_keywords == ["Fox", "jumping", "animals", "fox", "Fox"]
        assert analysis.summary == "A fox jumps over a dog."

    def test_fenced_response(self):
        from autoagent.indexer import parse_analysis

        analysis = parse_analysis(f"```json\n{ANALYSIS}\n```")
        assert analysis.keywords == ["Fox", "jumping"]

    def test_missing_lists_treated_as_empty(self):
        from autoagent.indexer import parse_analysis

        analysis = parse_analysis('{"keywords": ["solo"]}')
        assert analysis.combined_keywords == ["solo"]
        assert analysis.summary == ""

    def test_empty_strings_dropped(self):
        from autoagent.indexer import parse_analysis

        analysis = parse_analysis('{"keywords": ["", "real", "  "], "themes": [null]}')
        assert analysis.combined_keywords == ["real"]

    @pytest.mark.parametrize("raw", [
        "no json here",
        '{"keywords": "not a list"}',
        '{"keywords": [], "themes": [], "entities": []}',
        '["keywords"]',
    ])
    def test_unusable_payload_raises(self, raw):
        from autoagent.indexer import AnalysisError, parse_analysis

        with pytest.raises(AnalysisError):
            parse_analysis(raw)


class TestTriggers:
    """Tests for parse_index_trigger"""

    @pytest.mark.parametrize("message,content", [
        ("index this: my notes", "my notes"),
        ("INDEX THIS:   spaced out  ", "spaced out"),
        ("Analyze this:report", "report"),
        ("index this:", ""),
    ])
    def test_trigger_prefixes(self, message, content):
        from autoagent.indexer import parse_index_trigger

        assert parse_index_trigger(message) == content

    @pytest.mark.parametrize("message", [
        "please index this: notes",
        " index this: leading space",
        "index this notes",
        "analyse this: british spelling",
        "",
    ])
    def test_non_triggers(self, message):
        from autoagent.indexer import is_index_request

        assert not is_index_request(message)


class TestIndexer:
    """Tests for Indexer.index"""

    @pytest.fixture
    def store(self):
        from autoagent.indexer import IndexStore
        return IndexStore()

    def _indexer(self, llm):
        from autoagent.indexer import ContentAnalyzer, Indexer
        return Indexer(analyzer=ContentAnalyzer(llm_client=llm, timeout=7.0))

    def test_analysis_success(self, store, fake_llm):
        from autoagent.common.schemas import ExtractionSource
        from autoagent.indexer import IndexingSucceeded

        llm = fake_llm(analysis=ANALYSIS)
        outcome = self._indexer(llm).index("The fox jumps.", store)

        assert isinstance(outcome, IndexingSucceeded)
        assert not outcome.used_fallback
        assert outcome.summary == "A fox jumps over a dog."
        assert outcome.record.keywords == ["Fox", "jumping", "animals", "fox", "Fox"]
        assert outcome.record.source == ExtractionSource.LLM
        assert store.records == (outcome.record,)

    def test_analysis_timeout_is_passed(self, store, fake_llm):
        llm = fake_llm(analysis=ANALYSIS)
        self._indexer(llm).index("text", store)

        _, kwargs = llm.generate_calls[0]
        assert kwargs["timeout"] == 7.0
        assert "keywords" in kwargs["system"]

    def test_unparseable_response_falls_back(self, store, fake_llm):
        from autoagent.indexer import IndexingFailedSoftly

        llm = fake_llm(analysis="Sorry, I cannot do that.")
        outcome = self._indexer(llm).index("The quick brown fox jumps over the lazy dog", store)

        assert isinstance(outcome, IndexingFailedSoftly)
        assert outcome.used_fallback
        assert outcome.record.keywords == ["quick", "brown", "jumps", "over", "lazy"]
        assert len(llm.generate_calls) == 1  # no retry
        assert len(store) == 1

    def test_provider_error_falls_back(self, store, fake_llm, caplog):
        from autoagent.indexer import IndexingFailedSoftly

        llm = fake_llm(generate_error=TimeoutError("request timed out"))
        outcome = self._indexer(llm).index("timeouts happen sometimes", store)

        assert isinstance(outcome, IndexingFailedSoftly)
        assert "timed out" in outcome.reason
        assert outcome.record.keywords == ["timeouts", "happen", "sometimes"]
        assert "Content analysis failed" in caplog.text

    def test_no_analyzer_falls_back(self, store):
        from autoagent.indexer import Indexer, IndexingFailedSoftly

        outcome = Indexer().index("standalone indexing works", store)

        assert isinstance(outcome, IndexingFailedSoftly)
        assert outcome.record.summary is None
        assert outcome.record.keywords == ["standalone", "indexing", "works"]

    def test_unavailable_llm_is_not_called(self, store, fake_llm):
        llm = fake_llm(available=False)
        self._indexer(llm).index("words words words", store)
        assert llm.generate_calls == []

    def test_empty_content_still_stored(self, store):
        from autoagent.indexer import Indexer

        outcome = Indexer().index("", store)

        assert outcome.record.keywords == []
        assert outcome.record.content == ""
        assert len(store) == 1

    def test_records_are_immutable_and_unique(self, store):
        from pydantic import ValidationError
        from autoagent.indexer import Indexer

        indexer = Indexer()
        first = indexer.index("first entry text", store).record
        second = indexer.index("first entry text", store).record

        assert first.id != second.id
        with pytest.raises(ValidationError):
            first.content = "changed"

    def test_insertion_order_preserved(self, store):
        from autoagent.indexer import Indexer

        indexer = Indexer()
        ids = [indexer.index(f"entry number {i}", store).record.id for i in range(3)]
        assert [r.id for r in store.records] == ids


class TestDescribeOutcome:
    """Tests for notification text"""

    def test_success_with_summary(self, make_record):
        from autoagent.indexer import IndexingSucceeded, describe_outcome

        outcome = IndexingSucceeded(record=make_record("x", ["a", "b"]), summary="Short.")
        assert describe_outcome(outcome) == "Indexed content with 2 keywords. Summary: Short."

    def test_success_without_summary(self, make_record):
        from autoagent.indexer import IndexingSucceeded, describe_outcome

        outcome = IndexingSucceeded(record=make_record("x", ["a"]))
        assert describe_outcome(outcome) == "Indexed content with 1 keywords. Content indexed successfully."

    def test_fallback_is_silent_by_default(self, make_record):
        from autoagent.indexer import IndexingFailedSoftly, describe_outcome

        outcome = IndexingFailedSoftly(record=make_record("x", ["a"]), reason="boom")
        assert describe_outcome(outcome) is None
        assert "local keyword extraction" in describe_outcome(outcome, notify_on_fallback=True)


class TestIndexStore:
    def test_clear_empties_and_counts(self, make_record):
        from autoagent.indexer import IndexStore

        store = IndexStore()
        for i in range(3):
            store.add(make_record(f"content {i}", ["kw"]))

        assert store.clear() == 3
        assert len(store) == 0
        assert store.records == ()

    def test_records_is_a_snapshot(self, make_record):
        from autoagent.indexer import IndexStore

        store = IndexStore()
        store.add(make_record("one", ["one"]))
        snapshot = store.records
        store.add(make_record("two", ["two"]))

        assert len(snapshot) == 1
        assert len(store) == 2
