"""Test fixtures: sample users/files, an isolated function registry, config, executor.

All tests should use these fixtures for consistency.
"""

import asyncio

import pytest

from actionflow.config import ActionflowConfig
from actionflow.functions.plugin import build_definition
from actionflow.functions.registry import FunctionRegistry
from actionflow.types import FailurePolicy, Workflow
from actionflow.workflows.executor import WorkflowExecutor


USERS = {
    "1": {"userId": "1", "name": "John", "email": "john@example.com"},
    "2": {"userId": "2", "name": "Jane", "email": "jane@example.com"},
    "3": {"userId": "3", "name": "Ana", "email": "ana@example.com"},
}

FILES = [
    {"fileId": "f1", "userId": "2", "name": "report.pdf"},
    {"fileId": "f2", "userId": "2", "name": "notes.txt"},
    {"fileId": "f3", "userId": "1", "name": "budget.xlsx"},
]


def make_workflow(*actions: dict, **options) -> Workflow:
    """Build a Workflow from plain action dicts."""
    return Workflow.model_validate({"type": "workflow", "actions": list(actions), "options": options})


@pytest.fixture
def outbox():
    """Emails actually sent by the confirmation-gated send_email function."""
    return []


@pytest.fixture
def registry(outbox):
    """Isolated registry with user/file lookups plus a few test helpers.

    Functions:
        get_user_by_id(userId)          async, returns a USERS entry
        get_all_users()                 async, returns every user
        get_file_by_user_id(userId)     sync, returns that user's FILES
        send_email(to, subject)         sync, needs confirmation, appends to outbox
        explode()                       always raises RuntimeError("boom")
        check_positive(n)               raises ValueError for n <= 0
        slow_echo(value, delay)         async, sleeps then returns value
        echo(**kwargs)                  returns its keyword arguments
    """
    async def get_user_by_id(userId: str) -> dict:
        """Get user information by id"""
        if userId not in USERS:
            raise ValueError(f"User {userId} not found")
        return dict(USERS[userId])

    async def get_all_users() -> list:
        """List all users"""
        return [dict(u) for u in USERS.values()]

    def get_file_by_user_id(userId: str) -> list:
        """Get the files owned by a user"""
        if userId is None:
            raise ValueError("userId is required")
        return [dict(f) for f in FILES if f["userId"] == userId]

    def send_email(to: str, subject: str = "Hello") -> dict:
        """Send an email"""
        outbox.append({"to": to, "subject": subject})
        return {"sent": True, "to": to}

    def explode() -> None:
        """Always fails"""
        raise RuntimeError("boom")

    def check_positive(n: int) -> int:
        """Reject non-positive numbers"""
        if n <= 0:
            raise ValueError(f"{n} is not positive")
        return n

    async def slow_echo(value: int, delay: float = 0.0) -> int:
        """Sleep, then return value"""
        await asyncio.sleep(delay)
        return value

    def echo(**kwargs) -> dict:
        """Return the arguments"""
        return kwargs

    reg = FunctionRegistry()
    for func, kwargs in [
        (get_user_by_id, {}),
        (get_all_users, {}),
        (get_file_by_user_id, {}),
        (send_email, {"needs_confirmation": True}),
        (explode, {}),
        (check_positive, {}),
        (slow_echo, {}),
        (echo, {}),
    ]:
        reg.register(build_definition(func, **kwargs), func)
    return reg


@pytest.fixture
def config():
    """Test configuration with safe defaults."""
    return ActionflowConfig(
        debug=False,
        failure_policy=FailurePolicy.COLLECT,
        map_concurrency=4,
        include_builtins=True,
        function_modules=[],
        request_timeout_seconds=None,
    )


@pytest.fixture
def executor(registry, config):
    return WorkflowExecutor(registry, config=config)


@pytest.fixture
def user_file_workflow():
    """Two-step example: fetch a user, then that user's files."""
    return make_workflow(
        {"id": "u", "tool": "get_user_by_id", "parameters": {"userId": "2"}},
        {"id": "f", "tool": "get_file_by_user_id", "parameters": {"userId": "u.userId"}},
    )
