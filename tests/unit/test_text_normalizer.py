"""Unit tests for scraped-field normalization helpers."""

from __future__ import annotations

import pytest

from src.utils.text_normalizer import (
    PLACEHOLDER,
    extract_slug,
    normalize_text,
    sanitize_stage,
    sanitize_time,
    split_name_and_country,
)


class TestNormalizeText:
    def test_collapses_whitespace_and_trims(self) -> None:
        assert normalize_text("  Red \n\t Stage  ") == "Red Stage"

    @pytest.mark.parametrize("value", [None, "", "   ", "\n\t"])
    def test_empty_becomes_none(self, value) -> None:
        assert normalize_text(value) is None


class TestSplitNameAndCountry:
    def test_trailing_country_code_is_split(self) -> None:
        assert split_name_and_country("Architects GB") == ("Architects", "GB")

    def test_name_without_country(self) -> None:
        assert split_name_and_country("Architects") == ("Architects", None)

    def test_parenthesised_country(self) -> None:
        assert split_name_and_country("Architects (GB)") == ("Architects", "GB")

    def test_parenthesised_lowercase_is_not_a_country(self) -> None:
        assert split_name_and_country("Architects (gb)") == ("Architects (gb)", None)

    def test_lowercase_suffix_is_not_a_country(self) -> None:
        assert split_name_and_country("Bring Me The Horizon uk") == ("Bring Me The Horizon uk", None)

    def test_three_letter_suffix_is_not_a_country(self) -> None:
        assert split_name_and_country("Nothing More USA") == ("Nothing More USA", None)

    def test_whitespace_normalized_before_split(self) -> None:
        assert split_name_and_country("  Kraftklub \n DE ") == ("Kraftklub", "DE")

    def test_empty(self) -> None:
        assert split_name_and_country(None) == (None, None)


class TestExtractSlug:
    def test_last_segment_with_trailing_slash(self) -> None:
        assert extract_slug("https://rockforpeople.cz/lineup/architects/") == "architects"

    def test_last_segment_without_trailing_slash(self) -> None:
        assert extract_slug("https://www.novarock.at/en/artist/kraftklub") == "kraftklub"

    def test_root_url_has_no_slug(self) -> None:
        assert extract_slug("https://fest.example/") is None

    def test_none(self) -> None:
        assert extract_slug(None) is None


class TestSanitizeStage:
    def test_plain_label_kept(self) -> None:
        assert sanitize_stage(" Red   Stage ") == "Red Stage"

    @pytest.mark.parametrize("value", ["tba", "TBA", "Tba"])
    def test_tba_any_case_becomes_placeholder(self, value) -> None:
        assert sanitize_stage(value) == PLACEHOLDER

    def test_event_card_artifact_rejected(self) -> None:
        assert sanitize_stage("event-card event-card--large") is None

    def test_empty_is_none(self) -> None:
        assert sanitize_stage("  ") is None


class TestSanitizeTime:
    def test_strict_hh_mm_accepted(self) -> None:
        assert sanitize_time("20:30") == "20:30"

    def test_single_digit_hour_accepted(self) -> None:
        assert sanitize_time("8:30") == "8:30"

    @pytest.mark.parametrize("value", ["tba", "TBA"])
    def test_tba_becomes_placeholder(self, value) -> None:
        assert sanitize_time(value) == PLACEHOLDER

    @pytest.mark.parametrize("value", ["20:30:00", "8:30pm", "20.30", "evening"])
    def test_non_strict_values_rejected(self, value) -> None:
        assert sanitize_time(value) is None
