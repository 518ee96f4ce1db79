import numpy as np
import pytest

from fit_and_figure.game import (
    LEVELS,
    BestTime,
    GameGrid,
    GameState,
    PlacementStatus,
    ProgressTracker,
    PuzzleEngine,
    ZoneType,
    get_level,
    verify_level,
)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def engine() -> PuzzleEngine:
    eng = PuzzleEngine()
    eng.load_level(get_level(1))
    return eng


def play_level_one_solution(engine: PuzzleEngine):
    assert engine.place_shape(2, 0, 0).ok
    assert engine.place_shape(1, 0, 1).ok
    assert engine.rotate_shape(3)
    return engine.place_shape(3, 2, 1)


def play_upside_down_square(engine: PuzzleEngine):
    engine.place_shape(2, 0, 0)
    engine.rotate_shape(1)
    engine.rotate_shape(1)
    engine.place_shape(1, 0, 1)
    engine.rotate_shape(3)
    return engine.place_shape(3, 2, 1)


class TestCanonicalSolutions:
    @pytest.mark.parametrize("level", LEVELS, ids=lambda lvl: f"level{lvl.id}")
    def test_every_catalog_solution_solves(self, level) -> None:
        result = verify_level(level)
        assert result.complete
        assert result.solved
        assert result.violated_zones == ()

    def test_level_one_authored_solution(self, engine: PuzzleEngine) -> None:
        result = play_level_one_solution(engine)

        assert result.ok
        assert result.completion is not None and result.completion.solved
        assert engine.grid.to_rows() == [[5, 2, 2], [2, 1, 4], [1, 5, 3]]
        assert engine.state == GameState.SOLVED

    def test_apply_solution_from_a_messy_board(self, engine: PuzzleEngine) -> None:
        engine.rotate_shape(1)
        engine.place_shape(3, 0, 0)
        result = engine.apply_solution()
        assert result.solved
        assert engine.state == GameState.SOLVED


class TestFailedAttempt:
    def test_upside_down_square_breaks_equal_zone(self, engine: PuzzleEngine) -> None:
        result = play_upside_down_square(engine)

        completion = result.completion
        assert completion is not None
        assert completion.complete and not completion.solved
        assert completion.state == GameState.FAILED_ATTEMPT
        kinds = [zone.kind for zone in completion.violated_zones]
        assert ZoneType.EQUAL in kinds
        assert ZoneType.SUMMATIVE in kinds
        assert ZoneType.DISTINCT not in kinds
        assert "equal (=)" in completion.message
        assert engine.grid.to_rows() == [[5, 4, 1], [2, 2, 2], [1, 5, 3]]

    def test_failed_attempt_returns_to_play(self, engine: PuzzleEngine) -> None:
        play_upside_down_square(engine)
        assert engine.state == GameState.IN_PROGRESS
        assert engine.grid.is_full()

        assert engine.remove_shape(1)
        engine.rotate_shape(1)
        engine.rotate_shape(1)
        result = engine.place_shape(1, 0, 1)

        assert result.completion is not None and result.completion.solved
        assert engine.state == GameState.SOLVED


class TestCompletionGating:
    def test_partial_grid_is_never_judged(self, engine: PuzzleEngine) -> None:
        engine.place_shape(2, 0, 0)
        engine.place_shape(1, 0, 1)

        result = engine.check_completion()

        assert not result.complete
        assert not result.solved
        assert result.violated_zones == ()
        assert engine.state == GameState.IN_PROGRESS

    @pytest.mark.parametrize("level", LEVELS, ids=lambda lvl: f"level{lvl.id}")
    def test_solution_minus_last_step_is_not_solved(self, level) -> None:
        eng = PuzzleEngine()
        eng.load_level(level)
        for step in level.solution[:-1]:
            shape = eng.get_shape(step.shape_id)
            while shape.rotation != step.rotation:
                eng.rotate_shape(shape.id)
            assert eng.place_shape(step.shape_id, *step.position).ok
        assert not eng.check_completion().solved

    def test_explicit_grid_is_evaluated_without_side_effects(self, engine: PuzzleEngine) -> None:
        tracker = ProgressTracker()
        engine.tracker = tracker
        solved_rows = GameGrid.from_rows([[5, 2, 2], [2, 1, 4], [1, 5, 3]])

        assert engine.check_completion(solved_rows).solved
        assert not engine.check_completion(GameGrid.from_rows([[5, 2, 2], [2, 1, 4], [1, 5, None]])).complete
        assert engine.state == GameState.IN_PROGRESS
        assert engine.grid.filled_count() == 0
        assert tracker.get_best_times() == []

    def test_completion_is_the_same_now_or_later(self, engine: PuzzleEngine) -> None:
        play_level_one_solution(engine)
        snapshot = engine.grid.copy()
        assert engine.check_completion(snapshot) == engine.check_completion(snapshot)


class TestMoves:
    def test_rejected_placement_keeps_grid(self, engine: PuzzleEngine) -> None:
        engine.place_shape(2, 0, 0)
        before = engine.grid.to_rows()

        assert engine.place_shape(1, 2, 2).status == PlacementStatus.OUT_OF_BOUNDS
        assert engine.place_shape(3, 1, 0).status == PlacementStatus.OVERLAP
        assert engine.grid.to_rows() == before

    def test_place_then_remove_restores_grid(self, engine: PuzzleEngine) -> None:
        engine.place_shape(2, 0, 0)
        before_values, before_filled = engine.grid.clone_state()

        engine.place_shape(1, 0, 1)
        assert engine.remove_shape(1)

        assert np.array_equal(engine.grid.values, before_values)
        assert np.array_equal(engine.grid.filled, before_filled)

    def test_rotating_a_placed_shape_is_refused(self, engine: PuzzleEngine) -> None:
        engine.place_shape(3, 0, 0)
        assert engine.rotate_shape(3) is False
        assert engine.get_shape(3).rotation == 0

    def test_unknown_shape_ids_are_rejected(self, engine: PuzzleEngine) -> None:
        assert engine.rotate_shape(99) is False
        assert engine.remove_shape(99) is False
        assert engine.place_shape(99, 0, 0).status == PlacementStatus.INVALID_SHAPE_STATE

    def test_remove_unplaced_is_noop(self, engine: PuzzleEngine) -> None:
        assert engine.remove_shape(1) is False

    def test_find_shape_at(self, engine: PuzzleEngine) -> None:
        engine.place_shape(1, 0, 1)
        assert engine.find_shape_at(1, 2).id == 1
        assert engine.find_shape_at(0, 0) is None
        engine.remove_shape(1)
        assert engine.find_shape_at(1, 2) is None

    def test_get_zone_at(self, engine: PuzzleEngine) -> None:
        assert engine.get_zone_at(0, 0).kind == ZoneType.NONE
        zone = engine.get_zone_at(1, 1)
        assert zone.kind == ZoneType.SUMMATIVE and zone.target == 8
        assert engine.get_zone_at(5, 5) is None

    def test_zones_are_built_once(self, engine: PuzzleEngine) -> None:
        zones = engine.zones
        play_level_one_solution(engine)
        assert engine.zones is zones
        assert engine.validator.zones is zones

    def test_unplaced_and_placed_lists(self, engine: PuzzleEngine) -> None:
        engine.place_shape(2, 0, 0)
        assert [s.id for s in engine.placed_shapes()] == [2]
        assert [s.id for s in engine.unplaced_shapes()] == [1, 3]


class TestSessionState:
    def test_engine_before_loading(self) -> None:
        eng = PuzzleEngine()
        assert eng.state == GameState.LOADING
        assert eng.place_shape(1, 0, 0).status == PlacementStatus.INVALID_SHAPE_STATE
        assert eng.rotate_shape(1) is False
        assert eng.remove_shape(1) is False
        assert eng.find_shape_at(0, 0) is None
        result = eng.check_completion()
        assert result.state == GameState.LOADING and not result.complete

    def test_solved_engine_rejects_moves_until_reset(self, engine: PuzzleEngine) -> None:
        play_level_one_solution(engine)

        assert engine.remove_shape(1) is False
        assert engine.rotate_shape(1) is False
        assert engine.place_shape(1, 0, 0).status == PlacementStatus.INVALID_SHAPE_STATE

        engine.reset()
        assert engine.state == GameState.IN_PROGRESS
        assert engine.grid.filled_count() == 0
        assert all(not s.is_placed and s.rotation == 0 for s in engine.shapes.values())

    def test_reset_reuses_grid_and_shapes(self, engine: PuzzleEngine) -> None:
        grid = engine.grid
        shapes = dict(engine.shapes)
        engine.rotate_shape(3)
        engine.place_shape(3, 0, 0)
        engine.rotate_shape(1)

        engine.reset()

        assert engine.grid is grid
        assert grid.filled_count() == 0
        assert all(engine.shapes[k] is shape for k, shape in shapes.items())
        assert engine.get_shape(3).offsets == [(0, 0), (1, 0)]
        assert engine.get_shape(1).rotation == 0
        assert engine.place_shape(3, 0, 0).ok

    def test_solve_is_recorded_with_elapsed_time(self) -> None:
        clock = FakeClock(10.0)
        tracker = ProgressTracker()
        eng = PuzzleEngine(tracker=tracker, clock=clock)
        eng.load_level(get_level(1))

        clock.now = 52.5
        play_level_one_solution(eng)
        clock.now = 99.0

        assert eng.elapsed_seconds() == pytest.approx(42.5)
        assert tracker.get_best_times() == [BestTime(level_id=1, seconds=42.5)]
        assert tracker.score == 100
        # Re-checking a solved grid does not record twice
        eng.check_completion()
        assert tracker.score == 100

    def test_failed_attempt_is_not_recorded(self, engine: PuzzleEngine) -> None:
        tracker = ProgressTracker()
        engine.tracker = tracker
        play_upside_down_square(engine)
        assert tracker.completed_levels == []
