"""Unit tests for the pure snapshot merge functions."""

from __future__ import annotations

from src.models.scrape import ArtistDetail
from src.services.merge import identity_key, merge_details, merge_links


class TestIdentityKey:
    def test_slug_first(self, make_detail) -> None:
        assert identity_key(make_detail("Architects")) == "architects"

    def test_url_when_no_slug(self) -> None:
        detail = ArtistDetail(source="s", url="https://x/a", name="A")
        assert identity_key(detail) == "https://x/a"

    def test_name_when_no_slug_or_url(self) -> None:
        assert identity_key(ArtistDetail(source="s", name="Architects")) == "name:Architects"

    def test_none_when_no_identity(self) -> None:
        assert identity_key(ArtistDetail(source="s", day="Fri")) is None


class TestMergeLinks:
    def test_union_preserves_first_seen_order(self) -> None:
        assert merge_links(["a", "b"], ["b", "c", "a", "d"]) == ["a", "b", "c", "d"]

    def test_empty_existing(self) -> None:
        assert merge_links([], ["a", "a"]) == ["a"]


class TestMergeDetails:
    def test_newer_fields_override_and_missing_fields_are_kept(self, make_detail) -> None:
        old = make_detail("Architects", country="GB", stage="Red Stage", time="20:30")
        new = make_detail("Architects", country=None, stage="Blue Stage", time=None)

        outcome = merge_details([old], [new])

        assert outcome.skipped == 0
        assert len(outcome.details) == 1
        merged = outcome.details[0]
        assert merged.stage == "Blue Stage"
        assert merged.time == "20:30"
        assert merged.country == "GB"

    def test_identities_are_a_superset_of_both_batches(self, make_detail) -> None:
        batch_a = [make_detail("Architects"), make_detail("Kraftklub")]
        batch_b = [make_detail("Kraftklub"), make_detail("Sleep Token")]

        outcome = merge_details(batch_a, batch_b)

        keys = {identity_key(detail) for detail in outcome.details}
        assert keys == {"architects", "kraftklub", "sleep-token"}

    def test_name_only_record_is_merged_once(self) -> None:
        nameless_url = ArtistDetail(source="s", name="Mystery Guest", stage="TBA")
        again = ArtistDetail(source="s", name="Mystery Guest", time="22:00")

        outcome = merge_details([nameless_url], [again])

        assert outcome.skipped == 0
        assert len(outcome.details) == 1
        assert outcome.details[0].stage == "TBA"
        assert outcome.details[0].time == "22:00"

    def test_records_without_identity_are_counted(self, make_detail) -> None:
        orphan = ArtistDetail(source="s", day="Fri")
        outcome = merge_details([orphan], [make_detail("Architects"), orphan])

        assert outcome.skipped == 2
        assert [detail.name for detail in outcome.details] == ["Architects"]

    def test_inputs_are_not_mutated(self, make_detail) -> None:
        old = make_detail("Architects", stage="Red Stage")
        merge_details([old], [make_detail("Architects", stage="Blue Stage")])
        assert old.stage == "Red Stage"
