"""Scoring primitives and the recommendation composer."""

import pytest

from dailyinsight.core.models import Subtask, ValidationError
from dailyinsight.core.recommendations import (
    MAX_SCORE, RELEVANCE_FLOOR, TaskRecommender, recommend,
    score_for_energy, score_for_time_of_day, time_band,
)


def subtasks(n):
    return [Subtask(subtask_id=f"sub-{i}", title=f"Шаг {i}") for i in range(n)]


class TestEnergyScoring:
    def test_high_energy_rules_accumulate(self, make_task):
        task = make_task(priority="high", estimated_duration=60, subtasks=subtasks(4))
        score, reason = score_for_energy(task, "high")
        assert score == 4 + 3 + 2
        assert reason.startswith("Это важная задача.")
        assert "длинной задачи" in reason

    def test_cap(self, make_task):
        task = make_task(priority="high", estimated_duration=60, category="work",
                         subtasks=subtasks(4), is_flexible=True)
        score, _ = score_for_energy(task, "high")
        assert score == MAX_SCORE

    def test_medium_energy(self, make_task):
        task = make_task(priority="medium", estimated_duration=30, category="Personal", subtasks=subtasks(2))
        score, reason = score_for_energy(task, "medium")
        assert score == 10
        assert reason.split(". ")[0] == "Задача со средним приоритетом"

    def test_low_energy_penalises_demanding_work(self, make_task):
        light = make_task(priority="low", estimated_duration=15, category="organizing")
        demanding = make_task(priority="low", estimated_duration=15, category="work")
        assert score_for_energy(light, "low")[0] == MAX_SCORE
        assert score_for_energy(demanding, "low")[0] == 3 + 4 + 2 - 2

    def test_below_floor_is_not_relevant(self, make_task):
        task = make_task(priority="medium", estimated_duration=30, category="")
        assert score_for_energy(task, "high") is None

    def test_flexibility_does_not_lift_irrelevant_task(self, make_task):
        # -2 at low energy: only the demanding category penalty applies
        task = make_task(priority="medium", estimated_duration=30, category="work",
                         subtasks=subtasks(2), is_flexible=True)
        assert score_for_energy(task, "low") is None

    def test_flexibility_bonus(self, make_task):
        rigid = make_task(priority="high", estimated_duration=20)
        flexible = make_task(priority="high", estimated_duration=20, is_flexible=True)
        assert score_for_energy(flexible, "high")[0] == score_for_energy(rigid, "high")[0] + 1
        assert "сдвинуть" in score_for_energy(flexible, "high")[1]

    def test_invalid_energy_level(self, make_task):
        with pytest.raises(ValidationError):
            score_for_energy(make_task(), "turbo")


class TestTimeScoring:
    @pytest.mark.parametrize("hour,band", [
        (6, "morning"), (11, "morning"), (12, "afternoon"), (17, "afternoon"),
        (18, "evening"), (21, "evening"), (22, "night"), (0, "night"), (5, "night"),
    ])
    def test_bands(self, hour, band):
        assert time_band(hour) == band

    def test_morning_favours_important_work(self, make_task):
        task = make_task(priority="high", estimated_duration=60)
        assert score_for_time_of_day(task, 9)[0] == 5

    def test_evening_hobby(self, make_task):
        task = make_task(priority="low", estimated_duration=20, category="hobby")
        assert score_for_time_of_day(task, 19)[0] == 5

    def test_night_short_task(self, make_task):
        task = make_task(estimated_duration=10, category="planning")
        assert score_for_time_of_day(task, 23)[0] == 4

    def test_below_floor(self, make_task):
        assert score_for_time_of_day(make_task(priority="low", estimated_duration=20), 14) is None

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_invalid_hour(self, make_task, hour):
        with pytest.raises(ValidationError):
            score_for_time_of_day(make_task(), hour)


class TestComposer:
    def test_only_pending_tasks(self, make_task):
        tasks = [
            make_task(priority="high", status="completed"),
            make_task(priority="high", status="in-progress"),
            make_task(priority="high", status="postponed"),
            make_task(priority="high"),
        ]
        result = recommend(tasks, "high")
        assert [r.task.task_id for r in result] == [tasks[3].task_id]

    def test_nothing_below_floor(self, make_task):
        tasks = [make_task(priority=p, estimated_duration=d, category=c)
                 for p in ("low", "medium", "high")
                 for d in (10, 30, 60)
                 for c in ("", "work", "hobby", "organizing")]
        for energy in ("low", "medium", "high"):
            for hour in (None, 9, 14, 20, 23):
                assert all(r.score >= RELEVANCE_FLOOR for r in recommend(tasks, energy, hour))

    def test_equal_scores_keep_input_order(self, make_task):
        tasks = [make_task(priority="high", estimated_duration=20, title=f"Важное {n}") for n in range(5)]
        result = recommend(tasks, "high")
        assert [r.task.task_id for r in result] == [t.task_id for t in tasks]

    def test_time_bonus_is_half_and_reasons_joined(self, make_task):
        task = make_task(priority="high", estimated_duration=20)
        energy_score, energy_reason = score_for_energy(task, "high")
        time_score, time_reason = score_for_time_of_day(task, 9)
        [rec] = recommend([task], "high", 9)
        assert rec.score == min(energy_score + time_score // 2, MAX_SCORE)
        assert rec.reason == f"{energy_reason} {time_reason}"

    def test_time_alone_does_not_recommend(self, make_task):
        # relevant in the evening, irrelevant for high energy
        task = make_task(priority="low", estimated_duration=20, category="hobby")
        assert recommend([task], "high", 19) == []

    def test_duplicate_tasks_are_listed_once(self, make_task):
        task = make_task(priority="high")
        assert len(recommend([task, task], "high", 9)) == 1

    def test_empty_input(self):
        assert recommend([], "low", 3) == []

    def test_top_n(self, make_task):
        tasks = [make_task(priority="high") for _ in range(5)]
        assert len(TaskRecommender(top_n=2).recommend(tasks, "high")) == 2
        with pytest.raises(ValidationError):
            TaskRecommender(top_n=0)

    def test_separate_passes(self, make_task):
        morning = make_task(priority="high", estimated_duration=60, category="work")
        evening = make_task(priority="low", estimated_duration=20, category="hobby")
        recommender = TaskRecommender()
        assert [r.task for r in recommender.recommend_for_time_of_day([morning, evening], 9)] == [morning]
        assert [r.task for r in recommender.recommend_for_energy([morning, evening], "low")] == [evening]

    def test_high_energy_morning_scenario(self, make_task):
        tasks = [
            make_task(title="Отчет", priority="high", estimated_duration=60, category="work"),
            make_task(title="Звонок", priority="high", estimated_duration=15, category="personal"),
            make_task(title="Курс", priority="medium", estimated_duration=90, category="learning"),
            make_task(title="Чтение", priority="low", estimated_duration=50, category="hobby"),
            make_task(title="Почта", priority="medium", estimated_duration=10, category="work"),
            make_task(title="Уборка", priority="low", estimated_duration=20, category="organizing"),
            make_task(title="Покупки", priority="medium", estimated_duration=30, category="personal"),
            make_task(title="Разбор", priority="medium", estimated_duration=20, subtasks=subtasks(4)),
            make_task(title="Сдано", priority="high", estimated_duration=60, status="completed"),
            make_task(title="Прогулка", priority="low", estimated_duration=15, category="hobby"),
        ]
        result = recommend(tasks, "high", 9)

        titles = [r.task.title for r in result]
        assert titles == ["Отчет", "Курс", "Звонок", "Чтение", "Почта", "Разбор"]

        def is_primary(task):
            return task.priority == "high" or task.estimated_duration > 45

        primary = [r for r in result if is_primary(r.task)]
        others = [r for r in result if not is_primary(r.task)]
        assert result[:len(primary)] == primary
        assert min(r.score for r in primary) > max(r.score for r in others)
        for rec in primary:
            assert rec.reason
            if rec.task.priority == "high":
                assert "Это важная задача." in rec.reason
            if rec.task.estimated_duration > 45:
                assert "длинной задачи" in rec.reason
