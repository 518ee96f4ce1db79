import logging

import pytest

from fit_and_figure.game import GameGrid, LevelDefinitionError, ZoneType, create_zone


TOP = [(0, 0), (0, 1)]


def grid_of(*rows) -> GameGrid:
    return GameGrid.from_rows([list(row) for row in rows])


class TestEqualZone:
    def test_identical_values_pass(self) -> None:
        zone = create_zone("equal", TOP)
        assert zone.validate(grid_of([3, 3], [None, None]))

    def test_different_values_fail(self) -> None:
        zone = create_zone("equal", TOP)
        assert not zone.validate(grid_of([2, 5], [None, None]))

    def test_partial_fill_judges_filled_cells_only(self) -> None:
        zone = create_zone("equal", [(0, 0), (0, 1), (1, 0)])
        assert zone.validate(grid_of([4, None], [4, None]))
        assert not zone.validate(grid_of([4, None], [1, None]))


class TestDistinctZone:
    def test_duplicates_fail(self) -> None:
        zone = create_zone(ZoneType.DISTINCT, [(0, 0), (0, 1), (1, 0)])
        assert not zone.validate(grid_of([1, 2], [1, None]))

    def test_unique_values_pass_while_partial(self) -> None:
        zone = create_zone(ZoneType.DISTINCT, [(0, 0), (0, 1), (1, 1)])
        assert zone.validate(grid_of([1, 2], [1, None]))


class TestSummativeZone:
    def test_partial_zone_passes_vacuously(self) -> None:
        zone = create_zone("summative", TOP, target=5)
        assert zone.validate(grid_of([9, None], [None, None]))

    def test_full_zone_must_hit_target(self) -> None:
        zone = create_zone("summative", TOP, target=5)
        assert zone.validate(grid_of([2, 3], [None, None]))
        assert not zone.validate(grid_of([2, 4], [None, None]))

    def test_missing_target_is_an_authoring_error(self) -> None:
        with pytest.raises(LevelDefinitionError):
            create_zone("summative", TOP)
        with pytest.raises(LevelDefinitionError):
            create_zone("summative", TOP, target=True)

    def test_label_names_target(self) -> None:
        assert create_zone("summative", TOP, target=8).label == "summative (Σ=8)"


class TestVacuousAndFallback:
    @pytest.mark.parametrize("kind", ["equal", "distinct", "summative"])
    def test_empty_cells_pass(self, kind: str) -> None:
        empty = grid_of([None, None], [None, None])
        assert create_zone(kind, TOP, target=7).validate(empty)
        assert create_zone(kind, [], target=7).validate(empty)

    def test_none_zone_always_passes(self) -> None:
        zone = create_zone("none", TOP)
        assert zone.validate(grid_of([1, 2], [3, 4]))

    def test_unknown_tag_degrades_to_none(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="fit_and_figure"):
            zone = create_zone("diagonal", TOP, target=3)
        assert zone.kind == ZoneType.NONE
        assert zone.target is None
        assert "Unknown zone type" in caplog.text
        for rows in ([[1, 2], [3, 4]], [[5, 5], [None, None]], [[None, None], [None, None]]):
            assert zone.validate(GameGrid.from_rows(rows))

    def test_tags_are_case_insensitive(self) -> None:
        assert create_zone("EQUAL", TOP).kind == ZoneType.EQUAL

    def test_cells_outside_grid_count_as_empty(self) -> None:
        zone = create_zone("summative", [(0, 0), (5, 5)], target=1)
        assert zone.validate(grid_of([9, None], [None, None]))
