from __future__ import annotations

from typing import Callable

import httpx
import pytest

from fluxvid.config import Settings


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


class FakeSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {"HUGGINGFACE_API_TOKEN": "hf_test", "inference_default_wait": 0.0}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
