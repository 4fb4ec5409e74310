"""Pytest configuration file."""

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from life_parser.api.main import create_app
from life_parser.command.normalizer import Command
from life_parser.entities.types import Context
from life_parser.session import ParserSession


@pytest.fixture
def content() -> dict[str, Any]:
    """Locations and characters as a content loader would supply them."""
    return {
        "locations": {
            "home": {"name": "Your Apartment"},
            "cafe": {"name": "Coffee Bean Café"},
            "bank": {"name": "First City Bank"},
            "gym": {"name": "Iron Works Gym"},
            "city_park": {"name": "Central Park"},
        },
        "characters": {
            "owner": {"name": "Café Owner"},
            "loan_officer": {"name": "Loan Officer"},
            "trainer": {"name": "Personal Trainer"},
            "maria_gonzalez": {"name": "Maria Gonzalez"},
        },
    }


@pytest.fixture
def context(content: dict[str, Any]) -> Context:
    return Context.coerce(content)


@pytest.fixture
def executed() -> list[Command]:
    return []


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def session(
    context: Context, executed: list[Command], notices: list[str]
) -> ParserSession:
    """Session that records dispatched commands and player-facing notices."""
    return ParserSession(executor=executed.append, context=context, notify=notices.append)


@pytest.fixture
def app(session: ParserSession) -> FastAPI:
    """Create a test FastAPI application."""
    return create_app(session)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app)
