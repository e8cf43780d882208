import json

import pytest

from taskpoints.errors import (
    AlreadyComplete,
    CorruptData,
    InsufficientPoints,
    InvalidAmount,
    InvalidId,
    LockContention,
    NotComplete,
    NotFound,
    NothingToRestore,
)
from taskpoints.manager import TaskManager


def read_json(path):
    with open(path) as f:
        return json.load(f)


def test_first_run_without_files(manager):
    assert manager.list_tasks() == []
    assert manager.get_task_report() == "No tasks, well done!"
    assert manager.get_reward_report().splitlines() == [
        "Your balance of points: 0",
        "No rewards added yet",
    ]


def test_add_task_uses_configured_default_points(manager):
    task = manager.add_task("buy milk")
    assert task.task_points == 20
    assert manager.add_task("walk", points=3).task_points == 3
    assert [t.id for t in manager.list_tasks()] == [1, 2]


def test_add_task_rejects_negative_points(manager):
    with pytest.raises(InvalidAmount):
        manager.add_task("bad", points=-1)
    assert manager.list_tasks() == []


def test_complete_credits_points_and_persists_both_files(manager, settings):
    manager.add_task("buy milk", points=10)

    task, credited = manager.complete_task("1")
    assert credited == 10
    assert task.is_complete and task.points_settled

    todo = read_json(settings.storage.todo_file)
    assert todo["tasks"][0]["isComplete"] is True
    assert todo["tasks"][0]["isTaskPointsReceive"] is True

    rewards = read_json(settings.storage.reward_file)
    assert rewards["userPoints"] == 10
    assert rewards["isUserPointsUpdate"] is True


def test_uncomplete_debits_points(manager):
    manager.add_task("buy milk", points=10)
    manager.complete_task(1)

    task, debited = manager.uncomplete_task(1)
    assert debited == 10
    assert not task.is_complete
    assert not task.points_settled
    assert manager.load_rewards().balance == 0


def test_toggle_guards(manager):
    manager.add_task("a", points=5)
    with pytest.raises(NotComplete):
        manager.uncomplete_task(1)
    manager.complete_task(1)
    with pytest.raises(AlreadyComplete):
        manager.complete_task(1)
    assert manager.load_rewards().balance == 5


def test_repeated_cycles_never_double_credit(manager):
    manager.add_task("a", points=5)
    for _ in range(3):
        manager.complete_task(1)
        manager.uncomplete_task(1)
    manager.complete_task(1)
    assert manager.load_rewards().balance == 5


def test_complete_with_bad_ids(manager):
    manager.add_task("a")
    manager.add_task("b")
    manager.delete_task(1)

    with pytest.raises(InvalidId):
        manager.complete_task("3")
    with pytest.raises(InvalidId):
        manager.complete_task("abc")
    with pytest.raises(NotFound):
        manager.complete_task("1")


def test_complete_fails_without_touching_tasks_when_rewards_locked(manager, hold_lock):
    manager.add_task("a", points=5)
    with hold_lock(manager.reward_store.lock_path):
        with pytest.raises(LockContention):
            manager.complete_task(1)
    assert manager.list_tasks()[0].is_complete is False


def test_corrupt_reward_file_surfaces(manager, settings):
    manager.add_task("a", points=5)
    with open(settings.storage.reward_file, "w") as f:
        f.write("[1, 2")
    with pytest.raises(CorruptData):
        manager.complete_task(1)


def test_edit_task_and_points(manager):
    manager.add_task("a", points=1)
    assert manager.edit_task(1, "b").text == "b"
    assert manager.edit_task_points(1, 9).task_points == 9
    with pytest.raises(InvalidAmount):
        manager.edit_task_points(1, -2)
    assert manager.list_tasks()[0].task_points == 9


def test_delete_and_restore(manager):
    for text in ("a", "b", "c"):
        manager.add_task(text)
    manager.complete_task(2)

    assert manager.delete_task(2).text == "b"
    assert manager.delete_task(1).text == "a"

    restored = manager.restore_last_deleted()
    assert restored.text == "a"
    assert restored.id == 4
    assert restored.is_complete is False
    assert [t.text for t in manager.list_tasks()] == ["c", "a"]

    with pytest.raises(NothingToRestore):
        manager.restore_last_deleted()


def test_delete_cancelled_by_confirmation(manager):
    manager.add_task("a")
    questions = []

    def decline(question):
        questions.append(question)
        return False

    assert manager.delete_task(1, confirm=decline) is None
    assert "1. a" in questions[0]
    assert len(manager.list_tasks()) == 1


def test_clear_tasks(manager):
    manager.add_task("a")
    manager.add_task("b")
    assert manager.clear_tasks(confirm=lambda q: False) is None
    assert manager.clear_tasks(confirm=lambda q: True) == 2
    assert manager.list_tasks() == []
    assert manager.add_task("c").id == 1


def test_add_reward_uses_default_price(manager):
    reward = manager.add_reward("cinema")
    assert reward.price == 20
    assert reward.is_available is False


def test_buy_reward_scenario(manager):
    manager.add_task("work", points=20)
    manager.complete_task(1)
    manager.add_reward("cinema", price=15)
    assert manager.list_rewards().rewards[0].is_available is True

    reward, balance = manager.buy_reward("1")
    assert reward.description == "cinema"
    assert balance == 5

    listed = manager.list_rewards()
    assert listed.rewards[0].is_available is False
    assert listed.balance_dirty is False

    with pytest.raises(InsufficientPoints) as excinfo:
        manager.buy_reward(1)
    assert excinfo.value.shortfall == 10
    assert manager.load_rewards().balance == 5


def test_list_rewards_persists_recompute(manager, settings):
    manager.add_reward("cinema", price=5)
    manager.add_task("work", points=5)
    manager.complete_task(1)
    assert read_json(settings.storage.reward_file)["rewards"][0]["isAvailable"] is False

    manager.list_rewards()
    data = read_json(settings.storage.reward_file)
    assert data["rewards"][0]["isAvailable"] is True
    assert data["isUserPointsUpdate"] is False


def test_edit_reward(manager):
    manager.add_reward("cinema", price=5)
    assert manager.edit_reward_description(1, "theatre").description == "theatre"
    reward = manager.edit_reward_price(1, 0)
    assert reward.price == 0
    assert reward.is_available is True
    with pytest.raises(InvalidAmount):
        manager.edit_reward_price(1, -1)


def test_delete_reward_is_permanent(manager):
    manager.add_reward("a")
    manager.add_reward("b")
    assert manager.delete_reward(1, confirm=lambda q: False) is None
    assert manager.delete_reward(1).description == "a"
    with pytest.raises(NotFound):
        manager.delete_reward(1)
    assert [r.id for r in manager.list_rewards().rewards] == [2]


def test_clear_rewards_and_reset_points(manager):
    manager.add_task("work", points=30)
    manager.complete_task(1)
    manager.add_reward("a")

    assert manager.clear_rewards() == 1
    assert manager.load_rewards().balance == 30

    assert manager.reset_points(confirm=lambda q: False) is None
    assert manager.reset_points() == 30
    assert manager.load_rewards().balance == 0


def test_reports(manager):
    manager.add_task("buy milk", points=10)
    manager.add_task("walk", points=3)
    manager.complete_task(1)
    manager.add_reward("coffee", price=5)

    assert manager.get_task_report().splitlines() == [
        "Done  ID  Task",
        "[✓]   1.  buy milk",
        "[ ]   2.  walk",
    ]
    assert manager.get_task_report(show_points=True).splitlines()[0] == "Done  ID  Task      Points for task"

    lines = manager.get_reward_report().splitlines()
    assert lines[0] == "Your balance of points: 10"
    assert lines[1] == "Available  ID  Description  Price"
    assert lines[2] == "yes        1.  coffee       5"


def test_each_call_reloads_state(settings):
    first = TaskManager(settings)
    second = TaskManager(settings)
    first.add_task("a")
    assert [t.text for t in second.list_tasks()] == ["a"]


def _failing_reward_save(ledger):
    raise OSError("disk full")


def test_complete_saves_task_file_before_reward_file(manager, settings, monkeypatch):
    manager.add_task("a", points=10)
    manager.save_rewards(manager.load_rewards())
    monkeypatch.setattr(manager.reward_store, "save", _failing_reward_save)

    with pytest.raises(OSError):
        manager.complete_task(1)

    task = read_json(settings.storage.todo_file)["tasks"][0]
    assert task["isComplete"] is True
    assert task["isTaskPointsReceive"] is True
    assert read_json(settings.storage.reward_file)["userPoints"] == 0


def test_uncomplete_saves_task_file_before_reward_file(manager, settings, monkeypatch):
    manager.add_task("a", points=10)
    manager.complete_task(1)
    monkeypatch.setattr(manager.reward_store, "save", _failing_reward_save)

    with pytest.raises(OSError):
        manager.uncomplete_task(1)

    task = read_json(settings.storage.todo_file)["tasks"][0]
    assert task["isComplete"] is False
    assert task["isTaskPointsReceive"] is False
    assert read_json(settings.storage.reward_file)["userPoints"] == 10
