"""pytest shared fixtures"""

import asyncio
from typing import Any, Callable

import pytest

from steamcompass.models.game import CompletionHours, CriticScores, GameIdentity, ReviewSentiment
from steamcompass.models.signals import Success, Unavailable


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keeps provider cache directories out of the working tree"""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def portal_identity() -> GameIdentity:
    return GameIdentity(external_id=620, display_name="Portal 2", owned_playtime_minutes=480)


@pytest.fixture
def unknown_identity() -> GameIdentity:
    return GameIdentity(external_id=999999, display_name="Totally Obscure Indie", owned_playtime_minutes=0)


@pytest.fixture
def portal_signals() -> dict:
    """Signals for Portal 2 as the providers would return them"""
    return {
        "critic": CriticScores(critic_score=95, user_score=9.0),
        "reviews": ReviewSentiment(positive=9000, negative=100),
        "hours": CompletionHours(main=8.0, main_plus_extra=11.0, completionist=17.0),
    }


@pytest.fixture
def succeed() -> Callable[[Any], Callable]:
    """Factory: provider that always returns Success(value)"""
    def factory(value):
        async def fetch(_key):
            return Success(value)
        return fetch
    return factory


@pytest.fixture
def unavailable() -> Callable:
    """Provider that never finds anything"""
    async def fetch(key):
        return Unavailable(f"nothing for {key}")
    return fetch


@pytest.fixture
def exploding() -> Callable:
    """Provider that raises like a broken HTTP client"""
    async def fetch(key):
        raise ConnectionError(f"upstream down for {key}")
    return fetch


@pytest.fixture
def stalling() -> Callable:
    """Provider that never answers in time"""
    async def fetch(_key):
        await asyncio.sleep(10)
        return Success(None)
    return fetch
