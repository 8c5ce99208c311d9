"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that loads settings.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_FORMAT", "plain")

import pytest


class FakeClock:
    """Deterministic clock used to test expiry logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


SAMPLE_PLAN = """# Project Plan: Task Tracker

## 1. Project Overview
- **Goal**: Build a web app that lets small teams track tasks.
- **Timeline**: 3 weeks

## 3. Technical Implementation Plan
- [ ] **Task**: Set up project structure
- [ ] **Task**: Implement task list API
"""


@pytest.fixture
def sample_plan() -> str:
    return SAMPLE_PLAN
