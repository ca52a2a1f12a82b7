"""Tests for SpotCatalog listing, search and write operations."""

from unittest.mock import patch

import pytest

from core.spot_catalog import (
    Outcome,
    Spot,
    SpotCatalog,
    SpotFields,
    SpotPatch,
    StorageFailure,
    is_storable_id,
)


def _ranking_key(spot: Spot):
    return (-spot.recommend_count, spot.id)


@pytest.fixture
def catalog(tmp_path):
    catalog = SpotCatalog(tmp_path / "spots.db")
    catalog.initialize(seed_if_empty=True)
    return catalog


@pytest.fixture
def empty_catalog(tmp_path):
    catalog = SpotCatalog(tmp_path / "empty.db")
    catalog.initialize(seed_if_empty=False)
    return catalog


class TestInitialize:
    def test_seeds_two_spots_on_empty_table(self, tmp_path):
        catalog = SpotCatalog(tmp_path / "spots.db")
        assert catalog.initialize(seed_if_empty=True) == 2

        spots = catalog.list()
        assert [s.name for s in spots] == ["West Lake", "Huangshan"]
        assert all(s.recommend_count == 0 for s in spots)

    def test_is_idempotent(self, catalog):
        assert catalog.initialize(seed_if_empty=True) == 0
        assert catalog.count() == 2

    def test_without_seeding_leaves_table_empty(self, empty_catalog):
        assert empty_catalog.list() == []

    def test_does_not_seed_populated_table(self, empty_catalog):
        empty_catalog.create(name="Only")
        assert empty_catalog.initialize(seed_if_empty=True) == 0
        assert [s.name for s in empty_catalog.list()] == ["Only"]

    def test_unopenable_path_raises_storage_failure(self, tmp_path):
        # A directory is not a database file.
        catalog = SpotCatalog(tmp_path)
        with pytest.raises(StorageFailure):
            catalog.initialize()

    def test_corrupt_file_raises_storage_failure(self, tmp_path):
        db_file = tmp_path / "corrupt.db"
        db_file.write_bytes(b"this is definitely not sqlite" * 100)
        with pytest.raises(StorageFailure):
            SpotCatalog(db_file).initialize()

    def test_parent_path_is_a_file_raises_storage_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(StorageFailure):
            SpotCatalog(blocker / "spots.db").initialize()

    def test_reset_reseeds(self, catalog):
        catalog.create(name="Extra")
        catalog.recommend(1)
        assert catalog.reset(seed=True) == 2
        spots = catalog.list()
        assert [s.name for s in spots] == ["West Lake", "Huangshan"]
        assert all(s.recommend_count == 0 for s in spots)


class TestListing:
    def test_example_scenario(self, catalog):
        catalog.recommend(1)
        catalog.recommend(1)
        catalog.recommend(2)

        spots = catalog.list()
        assert [(s.id, s.recommend_count) for s in spots] == [(1, 2), (2, 1)]

    def test_orders_by_count_desc_then_id_asc(self, empty_catalog):
        ids = [empty_catalog.create(name=f"Spot {i}").id for i in range(6)]
        for spot_id, times in zip(ids, [0, 3, 1, 3, 0, 1]):
            for _ in range(times):
                empty_catalog.recommend(spot_id)

        spots = empty_catalog.list()
        assert spots == sorted(spots, key=_ranking_key)
        assert [s.id for s in spots] == [ids[1], ids[3], ids[2], ids[5], ids[0], ids[4]]


class TestSearch:
    @pytest.fixture
    def populated(self, empty_catalog):
        empty_catalog.create(name="West Lake", description="Hangzhou lake")
        empty_catalog.create(name="Huangshan", description="Yellow Mountain")
        empty_catalog.create(name="Lake Tai", description="Large freshwater lake")
        empty_catalog.create(name="100% Park", description="under_score")
        return empty_catalog

    def test_empty_query_equals_list(self, populated):
        populated.recommend(3)
        assert populated.search("") == populated.list()
        assert populated.search(None) == populated.list()

    def test_matches_name_or_description(self, populated):
        names = [s.name for s in populated.search("lake")]
        assert names == ["West Lake", "Lake Tai"]

    def test_is_case_sensitive(self, populated):
        assert [s.name for s in populated.search("Lake")] == ["West Lake", "Lake Tai"]
        assert [s.name for s in populated.search("LAKE")] == []

    def test_result_is_ranked_subset_of_list(self, populated):
        populated.recommend(3)
        listing = populated.list()
        expected = [s for s in listing if "a" in s.name or "a" in s.description]
        assert populated.search("a") == expected

    def test_wildcard_characters_are_literal(self, populated):
        assert [s.name for s in populated.search("%")] == ["100% Park"]
        assert [s.name for s in populated.search("_")] == ["100% Park"]

    def test_no_match_returns_empty(self, populated):
        assert populated.search("Great Wall") == []


class TestCreate:
    def test_create_returns_stored_spot(self, catalog):
        spot = catalog.create(
            SpotFields(
                name="Forbidden City",
                description="Palace museum",
                ticket="60 CNY",
                transport="Metro line 1",
                image_url="/img/palace.jpg",
            )
        )

        assert spot.id == 3
        assert spot.recommend_count == 0
        assert catalog.get(spot.id) == spot

        new = [s for s in catalog.list() if s.id == spot.id]
        assert len(new) == 1
        assert new[0].name == "Forbidden City"
        assert new[0].image_url == "/img/palace.jpg"

    def test_missing_fields_default_to_empty(self, empty_catalog):
        spot = empty_catalog.create(name="Bare")
        stored = empty_catalog.get(spot.id)
        assert stored.description == ""
        assert stored.ticket == ""
        assert stored.transport == ""
        assert stored.image_url == ""

    def test_none_fields_default_to_empty(self, empty_catalog):
        spot = empty_catalog.create(name="Bare", description=None)
        assert empty_catalog.get(spot.id).description == ""

    def test_duplicate_names_allowed(self, catalog):
        catalog.create(name="West Lake")
        assert [s.name for s in catalog.list()].count("West Lake") == 2

    def test_ids_are_not_reused(self, empty_catalog):
        first = empty_catalog.create(name="A")
        second = empty_catalog.create(name="B")
        empty_catalog.delete(second.id)
        third = empty_catalog.create(name="C")
        assert third.id > second.id > first.id


class TestRecommend:
    def test_increments_by_one(self, catalog):
        assert catalog.recommend(2) is Outcome.OK
        assert catalog.get(2).recommend_count == 1

    def test_n_calls_add_n(self, catalog):
        for _ in range(7):
            catalog.recommend(1)
        assert catalog.get(1).recommend_count == 7

    def test_unknown_id_is_noop(self, catalog):
        before = catalog.list()
        assert catalog.recommend(999) is Outcome.NOOP
        assert catalog.list() == before


class TestUpdate:
    def test_partial_update_keeps_empty_fields(self, catalog):
        outcome = catalog.update(1, SpotPatch(name="X", description=""))

        assert outcome is Outcome.OK
        spot = catalog.get(1)
        assert spot.name == "X"
        assert spot.description == "Famous scenic area in Hangzhou"
        assert spot.ticket == "Free"

    def test_keyword_patch(self, catalog):
        catalog.update(2, ticket="Ticket 190 CNY", image_url="/img/hs.jpg")
        spot = catalog.get(2)
        assert spot.ticket == "Ticket 190 CNY"
        assert spot.image_url == "/img/hs.jpg"
        assert spot.name == "Huangshan"

    def test_update_does_not_touch_recommend_count(self, catalog):
        catalog.recommend(1)
        catalog.update(1, SpotPatch(name="Renamed"))
        assert catalog.get(1).recommend_count == 1

    def test_empty_patch_is_ok_and_changes_nothing(self, catalog):
        before = catalog.get(1)
        assert catalog.update(1, SpotPatch()) is Outcome.OK
        assert catalog.get(1) == before

    def test_unknown_id_returns_not_found(self, catalog):
        before = catalog.list()
        assert catalog.update(999, SpotPatch(name="Ghost")) is Outcome.NOT_FOUND
        assert catalog.list() == before

    def test_row_deleted_after_lookup_returns_not_found(self, catalog):
        catalog.delete(1)
        # A stale existence check must not turn a vanished row into OK.
        with patch("core.spot_catalog.fetch_spot", return_value={"id": 1}):
            outcome = catalog.update(1, SpotPatch(name="Ghost"))
        assert outcome is Outcome.NOT_FOUND
        assert [s.id for s in catalog.list()] == [2]


class TestDelete:
    def test_removes_exactly_one(self, catalog):
        extra = catalog.create(name="Extra")
        assert catalog.delete(1) is Outcome.OK
        assert [s.id for s in catalog.list()] == [2, extra.id]

    def test_unknown_id_is_noop(self, catalog):
        assert catalog.delete(999) is Outcome.NOOP
        assert catalog.count() == 2

    def test_batch_delete_ignores_unknown_ids(self, catalog):
        keep = catalog.create(name="Keep")
        assert catalog.batch_delete({1, 2, 999}) is Outcome.OK
        assert [s.id for s in catalog.list()] == [keep.id]

    def test_batch_delete_empty_is_noop(self, catalog):
        assert catalog.batch_delete(set()) is Outcome.NOOP
        assert catalog.batch_delete(None) is Outcome.NOOP
        assert catalog.count() == 2

    def test_batch_delete_only_unknown_ids_is_noop(self, catalog):
        assert catalog.batch_delete([998, 999]) is Outcome.NOOP
        assert catalog.count() == 2

    def test_batch_delete_beyond_parameter_limit(self, empty_catalog):
        created = [empty_catalog.create(name=f"Spot {i}").id for i in range(3)]
        ids = list(range(10_000, 12_000)) + created[:2]

        assert empty_catalog.batch_delete(ids) is Outcome.OK
        assert [s.id for s in empty_catalog.list()] == [created[2]]


class TestOutOfRangeIds:
    BIG = 10**20

    def test_recommend_is_noop(self, catalog):
        assert catalog.recommend(self.BIG) is Outcome.NOOP
        assert catalog.recommend(-self.BIG) is Outcome.NOOP
        assert [s.recommend_count for s in catalog.list()] == [0, 0]

    def test_update_is_not_found(self, catalog):
        assert catalog.update(self.BIG, SpotPatch(name="Ghost")) is Outcome.NOT_FOUND
        assert catalog.update(self.BIG, SpotPatch()) is Outcome.NOT_FOUND

    def test_delete_is_noop(self, catalog):
        assert catalog.delete(self.BIG) is Outcome.NOOP
        assert catalog.count() == 2

    def test_batch_delete_skips_them(self, catalog):
        assert catalog.batch_delete([1, self.BIG]) is Outcome.OK
        assert [s.id for s in catalog.list()] == [2]
        assert catalog.batch_delete([self.BIG]) is Outcome.NOOP

    def test_get_returns_none(self, catalog):
        assert catalog.get(self.BIG) is None

    def test_largest_sqlite_integer_is_still_an_id(self, catalog):
        assert is_storable_id(2**63 - 1)
        assert not is_storable_id(2**63)
        assert not is_storable_id(True)
        assert catalog.recommend(2**63 - 1) is Outcome.NOOP


class TestSpotPatch:
    def test_empty_strings_mean_absent(self):
        patch = SpotPatch(name="", description="New", ticket=None)
        assert patch.name is None
        assert patch.changes() == {"description": "New"}

    def test_whitespace_is_a_value(self):
        assert SpotPatch(name=" ").changes() == {"name": " "}
