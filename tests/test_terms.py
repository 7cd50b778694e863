"""
Tests for the unresolved-term collector.

Run with: pytest tests/test_terms.py -v
"""
import pytest

from treetrans.sync.terms import (
    UnresolvedTermCollector,
    find_unresolved_terms,
    NO_TERMS_SENTINEL,
)


class TestFindUnresolvedTerms:
    """Tests for the token heuristic."""

    def test_placeholder_is_exempt(self):
        """Words written as {placeholder} in the source should not be flagged."""
        found = find_unresolved_terms(
            "Welkom {KEEP_ME} en {gebruiker}",
            "Welcome KEEP_ME and gebruiker",
        )
        assert "keep_me" not in found
        assert "gebruiker" not in found

    def test_unchanged_word_flagged(self):
        """A plain word present in both texts should be flagged, lowercased."""
        found = find_unresolved_terms("Klik op Instellingen", "Click on Instellingen")
        assert found == {"instellingen"}

    def test_all_caps_literal_exempt(self):
        """ALL_CAPS and underscore tokens are literals, not missed words."""
        found = find_unresolved_terms("Zet MAX_SIZE en API", "Set MAX_SIZE and API")
        assert found == set()

    def test_numbers_exempt(self):
        """Numbers should not be reported."""
        assert find_unresolved_terms("Versie 2024", "Version 2024") == set()

    def test_case_insensitive_match(self):
        """Matching should ignore case."""
        assert find_unresolved_terms("Gemini vertaalt", "gemini translates") == {"gemini"}


class TestCollector:
    """Tests for accumulating and flushing the report."""

    def test_observe_accumulates(self, tmp_path):
        """Observations should build up in memory."""
        collector = UnresolvedTermCollector(tmp_path / "terms.txt")
        collector.observe("Klik Instellingen", "Click Instellingen")
        collector.observe("Open Dashboard", "Open Dashboard")
        assert collector.terms == {"instellingen", "open", "dashboard"}

    def test_flush_merges_with_existing(self, tmp_path):
        """Flush should union with the report on disk and write it sorted."""
        report = tmp_path / "terms.txt"
        report.write_text("zebra\nalpha\n", encoding="utf-8")
        collector = UnresolvedTermCollector(report)
        collector.terms.update({"middel", "alpha"})

        assert collector.flush() == 3
        assert report.read_text(encoding="utf-8").splitlines() == ["alpha", "middel", "zebra"]
        assert collector.terms == set()

    def test_flush_empty_writes_sentinel(self, tmp_path):
        """No terms at all should produce the sentinel line."""
        report = tmp_path / "terms.txt"
        collector = UnresolvedTermCollector(report)

        assert collector.flush() == 0
        assert report.read_text(encoding="utf-8").strip() == NO_TERMS_SENTINEL

    def test_sentinel_not_read_as_term(self, tmp_path):
        """A previous sentinel report should count as empty."""
        report = tmp_path / "terms.txt"
        report.write_text(NO_TERMS_SENTINEL + "\n", encoding="utf-8")
        collector = UnresolvedTermCollector(report)
        collector.terms.add("woord")

        collector.flush()
        assert report.read_text(encoding="utf-8").splitlines() == ["woord"]

    def test_flush_failure_keeps_terms(self, tmp_path):
        """A report that cannot be written should be logged, not raised."""
        collector = UnresolvedTermCollector(tmp_path / "missing" / "terms.txt")
        collector.terms.add("woord")

        assert collector.flush() == -1
        assert collector.terms == {"woord"}

    def test_reset_removes_report(self, tmp_path):
        """Reset should delete the report and clear memory."""
        report = tmp_path / "terms.txt"
        report.write_text("woord\n", encoding="utf-8")
        collector = UnresolvedTermCollector(report)
        collector.terms.add("ander")

        collector.reset()
        assert not report.exists()
        assert collector.terms == set()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
