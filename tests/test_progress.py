import pytest

from fit_and_figure.game import BestTime, ProgressTracker


@pytest.fixture
def tracker() -> ProgressTracker:
    t = ProgressTracker(points_per_level=100)
    assert t.record_completion(1, 40.0) is True
    return t


class TestRepeatCompletions:
    def test_slower_repeat_keeps_best_time(self, tracker: ProgressTracker) -> None:
        assert tracker.record_completion(1, 55.0) is False
        assert tracker.get_best_times() == [BestTime(level_id=1, seconds=40.0)]

    def test_faster_repeat_replaces_best_time(self, tracker: ProgressTracker) -> None:
        assert tracker.record_completion(1, 12.5) is True
        assert tracker.get_best_times() == [BestTime(level_id=1, seconds=12.5)]

    def test_level_scores_only_once(self, tracker: ProgressTracker) -> None:
        tracker.record_completion(1, 10.0)
        tracker.record_completion(1, 90.0)
        assert tracker.score == 100
        assert tracker.completed_levels == [1]

        tracker.record_completion(2, 30.0)
        assert tracker.score == 200
        assert tracker.completed_levels == [1, 2]


class TestBestTimesOrdering:
    def test_sorted_by_time_then_level_id(self) -> None:
        tracker = ProgressTracker()
        tracker.record_completion(3, 20.0)
        tracker.record_completion(2, 20.0)
        tracker.record_completion(1, 35.0)
        tracker.record_completion(4, 5.0)

        assert [entry.level_id for entry in tracker.get_best_times()] == [4, 2, 3, 1]

    def test_empty_tracker(self) -> None:
        tracker = ProgressTracker(points_per_level=50)
        assert tracker.get_best_times() == []
        assert tracker.score == 0
        assert not tracker.is_completed(1)
