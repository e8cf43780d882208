#!/usr/bin/env python3
"""
TASKPOINTS - CLI Interface
==========================
Command-line tool for tasks that pay points and rewards that cost them.

Usage:
    taskpoints add buy milk -p 10
    taskpoints list -p
    taskpoints complete 1
    taskpoints not-complete 1
    taskpoints delete 1
    taskpoints cancel-delete
    taskpoints add-reward cinema night -p 50
    taskpoints rewards
    taskpoints buy-reward 1
"""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from .config import DEFAULT_CONFIG_PATH, load_config, save_config, update_defaults
from .errors import TaskPointsError
from .lookup import validate_amount
from .manager import TaskManager, describe_task

logger = logging.getLogger("taskpoints")


def prompt_yes_no(question: str) -> bool:
    """Simple y/N terminal prompt"""
    try:
        answer = input(f"{question} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def _confirmation(force: bool) -> Optional[Callable[[str], bool]]:
    return None if force else prompt_yes_no


# ========================================
# TASK COMMANDS
# ========================================

def cmd_add(args: argparse.Namespace, manager: TaskManager) -> int:
    points = args.points
    if points is not None and points < 0:
        print("Count of points must be positive, the default will be used for this task")
        points = None

    task = manager.add_task(" ".join(args.text), points)
    print(f"Added task: {describe_task(task)} ({task.task_points} points)")
    return 0


def cmd_list(args: argparse.Namespace, manager: TaskManager) -> int:
    print(manager.get_task_report(show_points=args.points))
    return 0


def cmd_complete(args: argparse.Namespace, manager: TaskManager) -> int:
    task, credited = manager.complete_task(args.id)

    if not args.delete:
        print(f"Well done! Task {task.id} was marked as completed! (+{credited} points)")
        print(describe_task(task))
        return 0

    deleted = manager.delete_task(task.id, confirm=_confirmation(args.force))
    if deleted is None:
        print(f"Task {task.id} was marked as completed, the deletion was cancelled!")
        return 0

    print(f"Well done! Task {task.id} has been completed and deleted! (+{credited} points)")
    return 0


def cmd_not_complete(args: argparse.Namespace, manager: TaskManager) -> int:
    task, debited = manager.uncomplete_task(args.id)
    print(f"Now task {task.id} is not completed! (-{debited} points)")
    print(describe_task(task))
    return 0


def cmd_edit(args: argparse.Namespace, manager: TaskManager) -> int:
    task = manager.edit_task(args.id, " ".join(args.text))
    print(f"Task is changed: {describe_task(task)}")
    return 0


def cmd_edit_points(args: argparse.Namespace, manager: TaskManager) -> int:
    task = manager.edit_task_points(args.id, validate_amount(args.points))
    print(f"Count of points has been changed for task {task.id}: {task.text} ({task.task_points} points)")
    return 0


def cmd_delete(args: argparse.Namespace, manager: TaskManager) -> int:
    task = manager.delete_task(args.id, confirm=_confirmation(args.force))
    if task is None:
        print("The deletion was cancelled!")
    else:
        print(f"Task {task.id} was deleted! (undo with: taskpoints cancel-delete)")
    return 0


def cmd_cancel_delete(args: argparse.Namespace, manager: TaskManager) -> int:
    task = manager.restore_last_deleted()
    print(f"The task was restored with NEW ID: {describe_task(task)}")
    return 0


def cmd_clear(args: argparse.Namespace, manager: TaskManager) -> int:
    removed = manager.clear_tasks(confirm=_confirmation(args.force))
    if removed is None:
        print("Operation was cancelled!")
    else:
        print(f"All tasks have been removed! ({removed})")
    return 0


def cmd_points_default(args: argparse.Namespace, manager: TaskManager) -> int:
    points = validate_amount(args.points)
    stored = load_config(args.config, apply_env=False)
    save_config(update_defaults(stored, task_points=points), args.config)
    print(f"Count of points by default has been changed: {points}")
    return 0


# ========================================
# REWARD COMMANDS
# ========================================

def cmd_add_reward(args: argparse.Namespace, manager: TaskManager) -> int:
    price = args.price
    if price is not None and price < 0:
        print("Price must be positive, the default will be used for this reward")
        price = None

    reward = manager.add_reward(" ".join(args.description), price)
    print(f"Added reward: {reward.id}. {reward.description} (with price {reward.price} points)")
    return 0


def cmd_rewards(args: argparse.Namespace, manager: TaskManager) -> int:
    print(manager.get_reward_report())
    return 0


def cmd_buy_reward(args: argparse.Namespace, manager: TaskManager) -> int:
    reward, balance = manager.buy_reward(args.id)
    print("Good Job! Here is your reward! Enjoy!")
    print(f"Receive reward: {reward.description}")
    print(f"Now your balance: {balance}")
    return 0


def cmd_edit_reward(args: argparse.Namespace, manager: TaskManager) -> int:
    reward = manager.edit_reward_description(args.id, " ".join(args.description))
    print(f"Description of reward has been changed: {reward.id}. {reward.description} with price {reward.price} points")
    return 0


def cmd_reprice(args: argparse.Namespace, manager: TaskManager) -> int:
    reward = manager.edit_reward_price(args.id, validate_amount(args.price))
    print(f"Price of reward has been changed: {reward.id}. {reward.description} with new price {reward.price} points")
    return 0


def cmd_price_default(args: argparse.Namespace, manager: TaskManager) -> int:
    price = validate_amount(args.price)
    stored = load_config(args.config, apply_env=False)
    save_config(update_defaults(stored, reward_price=price), args.config)
    print(f"Price of reward by default has been changed: {price}")
    return 0


def cmd_delete_reward(args: argparse.Namespace, manager: TaskManager) -> int:
    reward = manager.delete_reward(args.id, confirm=_confirmation(args.force))
    if reward is None:
        print("The deletion was cancelled!")
    else:
        print(f"The reward {reward.id} was deleted!")
    return 0


def cmd_clear_rewards(args: argparse.Namespace, manager: TaskManager) -> int:
    removed = manager.clear_rewards(confirm=_confirmation(args.force))
    if removed is None:
        print("Operation was cancelled!")
    else:
        print(f"All rewards have been removed! ({removed})")
    return 0


def cmd_reset_points(args: argparse.Namespace, manager: TaskManager) -> int:
    previous = manager.reset_points(confirm=_confirmation(args.force))
    if previous is None:
        print("Operation was cancelled!")
    else:
        print(f"Now your balance of points: 0 (was {previous})")
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, TaskManager], int]] = {
    "add": cmd_add,
    "list": cmd_list,
    "complete": cmd_complete,
    "not-complete": cmd_not_complete,
    "edit": cmd_edit,
    "edit-points": cmd_edit_points,
    "delete": cmd_delete,
    "cancel-delete": cmd_cancel_delete,
    "clear": cmd_clear,
    "points-default": cmd_points_default,
    "add-reward": cmd_add_reward,
    "rewards": cmd_rewards,
    "buy-reward": cmd_buy_reward,
    "edit-reward": cmd_edit_reward,
    "reprice": cmd_reprice,
    "price-default": cmd_price_default,
    "delete-reward": cmd_delete_reward,
    "clear-rewards": cmd_clear_rewards,
    "reset-points": cmd_reset_points,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskpoints",
        description="A todo list for the terminal that pays you in points",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskpoints add buy milk -p 10       Add a task worth 10 points
  taskpoints complete 1               Complete task 1 and receive its points
  taskpoints complete 1 -d -f         Complete and delete without asking
  taskpoints cancel-delete            Bring back the last deleted task
  taskpoints add-reward cinema -p 50  Add a reward costing 50 points
  taskpoints buy-reward 1             Spend points on reward 1
        """
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # TASKS
    add_parser = subparsers.add_parser("add", help="Add a new task")
    add_parser.add_argument("text", nargs="+", help="Task text")
    add_parser.add_argument("-p", "--points", type=int, help="Points received after completing the task")

    list_parser = subparsers.add_parser("list", help="Show all tasks")
    list_parser.add_argument("-p", "--points", action="store_true", help="Show points for each task")

    complete_parser = subparsers.add_parser("complete", help="Mark the task as completed and/or delete it")
    complete_parser.add_argument("id", help="Task ID")
    complete_parser.add_argument("-d", "--delete", action="store_true", help="Delete task after completion")
    complete_parser.add_argument("-f", "--force", action="store_true", help="Delete without confirmation (only with -d)")

    not_complete_parser = subparsers.add_parser("not-complete", help="Mark the task as not completed")
    not_complete_parser.add_argument("id", help="Task ID")

    edit_parser = subparsers.add_parser("edit", help="Edit the text of a task")
    edit_parser.add_argument("id", help="Task ID")
    edit_parser.add_argument("text", nargs="+", help="New task text")

    edit_points_parser = subparsers.add_parser("edit-points", help="Edit the points of a task")
    edit_points_parser.add_argument("id", help="Task ID")
    edit_points_parser.add_argument("points", help="New count of points")

    delete_parser = subparsers.add_parser("delete", help="Delete a task (can be undone once)")
    delete_parser.add_argument("id", help="Task ID")
    delete_parser.add_argument("-f", "--force", action="store_true", help="Delete without confirmation")

    subparsers.add_parser("cancel-delete", help="Restore the last deleted task with a new ID")

    clear_parser = subparsers.add_parser("clear", help="Remove all tasks without restore")
    clear_parser.add_argument("-f", "--force", action="store_true", help="Clear without confirmation")

    points_default_parser = subparsers.add_parser("points-default", help="Set the default points for new tasks")
    points_default_parser.add_argument("points", help="New default count of points")

    # REWARDS
    add_reward_parser = subparsers.add_parser("add-reward", help="Add a new reward")
    add_reward_parser.add_argument("description", nargs="+", help="Reward description")
    add_reward_parser.add_argument("-p", "--price", type=int, help="Price in points")

    subparsers.add_parser("rewards", help="Show all rewards and your balance")

    buy_parser = subparsers.add_parser("buy-reward", help="Buy a reward with your points")
    buy_parser.add_argument("id", help="Reward ID")

    edit_reward_parser = subparsers.add_parser("edit-reward", help="Edit the description of a reward")
    edit_reward_parser.add_argument("id", help="Reward ID")
    edit_reward_parser.add_argument("description", nargs="+", help="New description")

    reprice_parser = subparsers.add_parser("reprice", help="Edit the price of a reward")
    reprice_parser.add_argument("id", help="Reward ID")
    reprice_parser.add_argument("price", help="New price")

    price_default_parser = subparsers.add_parser("price-default", help="Set the default price for new rewards")
    price_default_parser.add_argument("price", help="New default price")

    delete_reward_parser = subparsers.add_parser("delete-reward", help="Delete a reward (no undo)")
    delete_reward_parser.add_argument("id", help="Reward ID")
    delete_reward_parser.add_argument("-f", "--force", action="store_true", help="Delete without confirmation")

    clear_rewards_parser = subparsers.add_parser("clear-rewards", help="Remove all rewards without restore")
    clear_rewards_parser.add_argument("-f", "--force", action="store_true", help="Clear without confirmation")

    reset_parser = subparsers.add_parser("reset-points", help="Reset your balance of points to zero")
    reset_parser.add_argument("-f", "--force", action="store_true", help="Reset without confirmation")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "complete" and args.force and not args.delete:
        parser.error("flag -f can only be used with -d")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        manager = TaskManager(load_config(args.config))
        return COMMANDS[args.command](args, manager)
    except TaskPointsError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
