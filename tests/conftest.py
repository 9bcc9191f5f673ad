"""Shared fixtures for envelope-rest tests."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Sequence

import pytest
from envelope_rest.descriptor import ResourceDescriptor, model_descriptor
from envelope_rest.transport import RawResponse
from pydantic import BaseModel

BASE_URL = "https://api.example.com/v1"


class Label(BaseModel):
    label: str
    color: str | None = None


class LabelFilter(BaseModel):
    color: str | None = None
    limit: int | None = None
    archived: bool | None = None


@dataclass
class SentRequest:
    method: str
    url: str
    params: list[tuple[str, str]]
    body: Any


class FakeTransport:
    """Transport double that records requests and replays scripted outcomes."""

    def __init__(self) -> None:
        self.requests: list[SentRequest] = []
        self._outcomes: list[RawResponse | Exception] = []

    def reply(self, *objects: Any, status: int = 200) -> FakeTransport:
        """Queue a 2xx response whose body is ``{"data": [objects...]}``."""
        self._outcomes.append(RawResponse(status, json.dumps({"data": list(objects)}).encode()))
        return self

    def reply_raw(self, content: bytes, status: int = 200) -> FakeTransport:
        self._outcomes.append(RawResponse(status, content))
        return self

    def fail(self, error: Exception) -> FakeTransport:
        self._outcomes.append(error)
        return self

    @property
    def last(self) -> SentRequest:
        return self.requests[-1]

    async def send(
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        body: Any | None = None,
    ) -> RawResponse:
        self.requests.append(SentRequest(method, url, list(params), body))
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def labels() -> ResourceDescriptor[Any, Label, LabelFilter]:
    return model_descriptor("labels", Label, params_model=LabelFilter)
