"""
test_content_parser.py
----------------------
Unit tests for the resilient content parser.

Tests:
- Extraction of single and many callouts, in order
- Per-callout recovery (fallback entries for broken siblings)
- Strict vs lenient handling of internal failures
- Transactional vs incremental handling of document-level failures
- Document warnings (truncation, callout limit)
- Nested callouts, non-text input, diagnostics sink
"""
import time
from unittest.mock import MagicMock

import pytest
from oneiro.core.exceptions import CalloutScanError, EntryBuildError, ParseOptionsError
from oneiro.core.logging_manager import OneiroLogger
from oneiro.dataclasses.dream_entry import DreamEntry, EntrySource
from oneiro.pipeline import content_parser
from oneiro.pipeline.content_parser import ContentParser, parse
from oneiro.pipeline.options import ParseOptions
from oneiro.utils.callouts import CalloutScanner


# ----- Helpers -----
def fail_on(marker, error=ValueError("unbalanced code fence")):
    """Patch target for DreamEntry.from_callout that breaks on one span."""
    original = DreamEntry.from_callout

    def fake(cls, block, **kwargs):
        if marker in block.raw_span:
            raise error
        return original(block, **kwargs)

    return classmethod(fake)


class BreakingScanner:
    """Scanner that fails after yielding ``good`` blocks."""

    def __init__(self, callout_type, max_matches=1000, good=2):
        self._inner = CalloutScanner(callout_type, max_matches=max_matches)
        self.good = good
        self.limit_reached = False

    def scan(self, text):
        for index, block in enumerate(self._inner.scan(text)):
            if index == self.good:
                raise CalloutScanError("scanner broke")
            yield block

    def scan_nested(self, text):
        return iter(())


def many_dreams(count):
    return "\n".join(
        f"[!dream] Dream {i}\nI dreamt number {i}.\nClarity: {i % 5}" for i in range(count)
    )


# ----- Extraction -----
class TestBasicExtraction:
    """Test the happy path."""

    def test_single_callout(self, basic_note):
        result = parse(basic_note, "dream", "journal.md")

        assert result.metadata.total_entries == 1
        entry = result.entries[0]
        assert entry.title == "My Dream"
        assert entry.metrics == {"Clarity": 4, "Vividness": 3}
        assert entry.source == "journal.md"
        assert result.success
        assert result.metadata.warning_count == 0

    def test_structured(self, structured_note):
        entry = parse(structured_note, source_path="j.md").entries[0]

        assert entry.title == "The Lighthouse"
        assert entry.date == "2024-03-12"
        assert entry.metrics["Vividness"] == 5
        assert entry.content.startswith("Date: 2024-03-12")

    def test_type_filter(self):
        """Only the requested type is extracted."""
        text = "[!dream] A dream\nClarity: 1\n[!memory] A memory\nClarity: 2"
        result = parse(text, "memory", "j.md")

        assert [e.title for e in result.entries] == ["A memory"]
        assert result.metadata.callout_type == "memory"

    def test_many_in_order(self):
        """A hundred callouts come back in document order."""
        result = parse(many_dreams(100), source_path="j.md")

        assert result.metadata.total_entries == 100
        assert [e.title for e in result.entries] == [f"Dream {i}" for i in range(100)]
        assert result.success

    def test_three_dreams(self, three_dreams_note, fixed_date):
        """An unbalanced code fence is just text."""
        opts = ParseOptions(source_path="j.md", fallback_date=fixed_date)
        result = parse(three_dreams_note, options=opts)

        assert [e.title for e in result.entries] == ["First Dream", "Broken Dream", "Third Dream"]
        assert [e.date for e in result.entries] == ["2024-01-01", "2024-06-01", "2024-01-03"]
        assert result.success

    def test_date_fallback(self, fixed_date):
        opts = ParseOptions(source_path="j.md", fallback_date=fixed_date)
        assert parse("[!dream] No date here", options=opts).entries[0].date == "2024-06-01"

    def test_validation_warnings_attached(self):
        """Defects are attached to the entry and counted, never fatal."""
        result = parse("[!dream] Tiny")

        entry = result.entries[0]
        assert "No metrics found" in entry.callout_metadata.warnings
        assert "Missing source" in entry.callout_metadata.warnings
        assert result.metadata.warning_count == len(entry.callout_metadata.warnings)
        assert entry.callout_metadata.is_valid
        assert result.success

    def test_validation_disabled(self):
        result = parse("[!dream] Tiny", options=ParseOptions(validate=False))
        assert result.entries[0].callout_metadata.warnings == []
        assert result.metadata.warning_count == 0

    def test_sanitize(self):
        """Typographic punctuation is normalized before scanning."""
        assert parse("[!dream] “Fly”").entries[0].title == '"Fly"'
        raw = parse("[!dream] “Fly”", options=ParseOptions(sanitize=False))
        assert raw.entries[0].title == "“Fly”"


class TestCountConsistency:
    """total_entries always equals the number of entries."""

    @pytest.mark.parametrize(
        "text",
        ["", "[!dream] a", many_dreams(7), "[!dream]" * 5, "[!note] only notes"],
    )
    def test_total_matches_entries(self, text):
        result = parse(text, source_path="j.md")
        assert result.metadata.total_entries == len(result.entries)
        assert result.metadata.total_word_count == sum(e.word_count for e in result.entries)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "[!dream] a",
            many_dreams(7),
            "[!dream]" * 5,
            "[!dream]" * 50,
            "[!note] only notes",
        ],
    )
    def test_word_count_per_entry(self, text):
        """Every entry's word count matches its own content."""
        result = parse(text, source_path="j.md")
        assert all(e.word_count == len(e.content.split()) for e in result.entries)

    def test_word_count_nested_entries(self, nested_note):
        opts = ParseOptions(source_path="j.md", include_nested=True)
        result = parse(nested_note, options=opts)

        assert result.entries[1].callout_metadata.nested_in_type == "journal"
        assert all(e.word_count == len(e.content.split()) for e in result.entries)


class TestNeverCrashes:
    """Lenient parsing returns a result for any text."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   \n\t",
            "[!",
            "[![![!",
            "[!dream",
            "no callouts at all",
            "[!dream] ```\n{[(\n" * 3,
            "\x00\x01[!dream]\x7f body",
        ],
    )
    def test_returns_result(self, text):
        result = parse(text)
        assert result.metadata.total_entries == len(result.entries)

    def test_unclosed_markers_parse_quickly(self):
        """Repeated unclosed pipe markers finish in linear time."""
        started = time.perf_counter()
        result = parse("[!dream|" * 60000)
        elapsed = time.perf_counter() - started

        assert result.entries == []
        assert result.success
        assert elapsed < 5

    def test_empty_document_succeeds(self):
        result = parse("")
        assert result.entries == []
        assert result.success

    def test_empty_callouts_become_fallbacks(self):
        """Markers with nothing after them are recovered, not dropped."""
        result = parse("[!dream]" * 50, source_path="j.md")

        assert result.metadata.total_entries == 50
        assert result.metadata.error_count == 50
        assert all(e.is_fallback for e in result.entries)
        assert result.metadata.errors[0] == (
            "Error processing callout: Empty callout content found at position 0"
        )


# ----- Recovery -----
class TestPerCalloutRecovery:
    """A broken callout never takes its siblings down."""

    def test_malformed_sibling(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(DreamEntry, "from_callout", fail_on("Broken Dream"))
        result = parse(three_dreams_note, source_path="j.md")

        assert result.metadata.total_entries == 3
        first, broken, third = result.entries
        assert not first.is_fallback
        assert not third.is_fallback
        assert third.title == "Third Dream"

        assert broken.is_fallback
        assert broken.title == "Unparseable: Broken Dream"
        assert broken.callout_metadata.is_valid is False
        assert "Original content:\nBroken Dream" in broken.content

        assert result.metadata.error_count == 1
        assert result.metadata.errors == ["Error processing callout: unbalanced code fence"]
        assert not result.success

    def test_recovery_ignores_transactional(self, monkeypatch, three_dreams_note):
        """Block failures keep every entry even in transactional mode."""
        monkeypatch.setattr(DreamEntry, "from_callout", fail_on("Broken Dream"))
        opts = ParseOptions(source_path="j.md", transactional=True)
        assert parse(three_dreams_note, options=opts).metadata.total_entries == 3


class TestStrictMode:
    """Strict mode re-raises the original exception."""

    def test_block_failure_raised(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(DreamEntry, "from_callout", fail_on("Broken Dream"))
        with pytest.raises(ValueError, match="unbalanced code fence"):
            parse(three_dreams_note, options=ParseOptions(strict=True))

    def test_empty_callout_raised(self):
        with pytest.raises(EntryBuildError):
            parse("[!dream]", options=ParseOptions(strict=True))

    def test_scan_failure_raised(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(content_parser, "CalloutScanner", BreakingScanner)
        with pytest.raises(CalloutScanError):
            parse(three_dreams_note, options=ParseOptions(strict=True))

    def test_non_text_raised(self):
        with pytest.raises(TypeError):
            parse(12345, options=ParseOptions(strict=True))

    def test_clean_input_unaffected(self, basic_note):
        assert parse(basic_note, options=ParseOptions(strict=True)).metadata.total_entries == 1


class TestDocumentFailurePolicy:
    """Transactional discards, incremental keeps."""

    def test_incremental_keeps_entries(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(content_parser, "CalloutScanner", BreakingScanner)
        result = parse(three_dreams_note, source_path="j.md")

        assert [e.title for e in result.entries] == ["First Dream", "Broken Dream"]
        assert result.metadata.error_count == 1
        assert result.metadata.errors == ["Failed to parse content: scanner broke"]

    def test_transactional_discards(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(content_parser, "CalloutScanner", BreakingScanner)
        result = parse(three_dreams_note, options=ParseOptions(transactional=True))

        assert result.entries == []
        assert result.metadata.total_entries == 0
        assert result.metadata.error_count == 1
        assert not result.success


# ----- Warnings -----
class TestDocumentWarnings:
    def test_callout_limit(self):
        opts = ParseOptions(max_matches=5, validate=False)
        result = parse(many_dreams(10), options=opts)

        assert result.metadata.total_entries == 5
        assert result.metadata.warnings == [
            "Reached maximum callout limit (5). Some callouts may be skipped."
        ]
        assert result.metadata.warning_count == 1
        assert result.success

    def test_callout_limit_reached_exactly(self):
        opts = ParseOptions(max_matches=5, validate=False)
        result = parse(many_dreams(5), options=opts)

        assert result.metadata.total_entries == 5
        assert result.metadata.warnings == [
            "Reached maximum callout limit (5). Some callouts may be skipped."
        ]

    def test_below_limit_no_warning(self):
        opts = ParseOptions(max_matches=5, validate=False)
        assert parse(many_dreams(4), options=opts).metadata.warnings == []

    def test_default_limit(self):
        result = parse("[!dream] x\n" * 1500, options=ParseOptions(validate=False))
        assert result.metadata.total_entries == 1000
        assert "Reached maximum callout limit (1000)" in result.metadata.warnings[0]

    def test_truncation(self, basic_note):
        opts = ParseOptions(max_content_length=20, validate=False)
        result = parse(basic_note, options=opts)

        assert result.metadata.warnings == [
            f"Content truncated from {len(basic_note)} to 20 characters"
        ]
        assert result.entries[0].title == "My Dream"


# ----- Nested -----
class TestNested:
    def test_off_by_default(self, nested_note):
        result = parse(nested_note, source_path="j.md")
        assert result.metadata.total_entries == 1
        assert result.entries[0].callout_metadata.nested_in_type is None

    def test_nested_added(self, nested_note):
        opts = ParseOptions(source_path="j.md", include_nested=True)
        result = parse(nested_note, options=opts)

        assert result.metadata.total_entries == 2
        nested = result.entries[1]
        assert nested.callout_metadata.nested_in_type == "journal"
        assert nested.callout_metadata.id == "nested-0-0"
        assert nested.source == EntrySource(file="j.md", id="nested-0-0")
        assert nested.date == "2024-02-20"
        assert nested.metrics == {"Clarity": 5}
        assert nested.callout_metadata.is_valid

    def test_invalid_nested_flagged(self):
        """Nested entries with defects are marked invalid."""
        text = "> [!journal] Tue\n> > [!dream] Just a short dream\n"
        result = parse(text, options=ParseOptions(source_path="j.md", include_nested=True))

        top, nested = result.entries
        assert "No metrics found" in nested.callout_metadata.warnings
        assert nested.callout_metadata.is_valid is False
        assert top.callout_metadata.is_valid is True


# ----- Input and API -----
class TestInput:
    def test_none_is_empty(self):
        result = parse(None)
        assert result.entries == []
        assert result.success

    def test_non_text_reported(self):
        result = parse(12345)
        assert result.entries == []
        assert result.metadata.errors == ["Invalid content type: int"]
        assert not result.success

    def test_bad_callout_type_fails_fast(self):
        with pytest.raises(ParseOptionsError):
            parse("[!dream] x", "not a type!")

    def test_overrides_keep_other_options(self):
        opts = ParseOptions(include_nested=True)
        result = parse("[!memory] Beach\nClarity: 2", "memory", "m.md", options=opts)
        assert result.entries[0].source == "m.md"


class TestContentParser:
    def test_reusable(self, basic_note, default_options):
        """Each parse starts from a clean context."""
        parser = ContentParser(default_options)
        first = parser.parse(basic_note)
        second = parser.parse(basic_note)

        assert first.metadata.total_entries == second.metadata.total_entries == 1
        assert first.entries[0] is not second.entries[0]

    def test_per_call_options(self, basic_note):
        parser = ContentParser(ParseOptions(callout_type="memory"))
        assert parser.parse(basic_note).entries == []
        assert len(parser.parse(basic_note, ParseOptions()).entries) == 1

    def test_logger_receives_operation(self, basic_note, default_options):
        logger = MagicMock(spec=OneiroLogger)
        ContentParser(default_options, logger).parse(basic_note)

        logger.log_operation.assert_called_once()
        operation, details = logger.log_operation.call_args[0]
        assert operation == "parse_content"
        assert details["entries"] == 1
        assert details["source"] == "journal/2024-01.md"

    def test_logger_receives_errors(self, monkeypatch, three_dreams_note):
        monkeypatch.setattr(DreamEntry, "from_callout", fail_on("Broken Dream"))
        logger = MagicMock(spec=OneiroLogger)
        ContentParser(ParseOptions(), logger).parse(three_dreams_note)

        error = logger.log_error.call_args[0][0]
        assert isinstance(error, ValueError)
        assert logger.log_error.call_args.kwargs["category"] == "build"

    def test_unexpected_failure_contained(self, monkeypatch, basic_note):
        """Lenient mode turns any escaped exception into an empty result."""

        def explode(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(content_parser, "enforce_max_length", explode)
        result = parse(basic_note)

        assert result.entries == []
        assert result.metadata.errors == ["Failed to parse content: disk on fire"]
