"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, the stub renderer, and application clients.
"""

from pathlib import Path
from typing import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paparazzi.api.main import create_app
from paparazzi.config.logging import setup_logging
from paparazzi.config.platform import RuntimeEnvironment
from paparazzi.config.settings import Settings

from tests.utils.helpers import build_settings, install_stub_renderer, make_png


@pytest.fixture(scope="session", autouse=True)
def configure_logging(tmp_path_factory: pytest.TempPathFactory) -> None:
    """Console-only logging for the whole session."""
    setup_logging(build_settings(tmp_path_factory.mktemp("logging")))


@pytest.fixture
def stub_renderer(tmp_path: Path) -> Path:
    """Executable stub renderer."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return install_stub_renderer(bin_dir)


@pytest.fixture
def fixed_png(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> bytes:
    """The image the stub renderer writes."""
    data = make_png()
    png_file = tmp_path / "fixed.png"
    png_file.write_bytes(data)
    monkeypatch.setenv("STUB_PNG_FILE", str(png_file))
    return data


@pytest.fixture
def argv_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File the stub renderer records its arguments in."""
    path = tmp_path / "argv.json"
    monkeypatch.setenv("STUB_ARGV_FILE", str(path))
    return path


@pytest.fixture
def pid_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File the stub renderer records its process id in."""
    path = tmp_path / "renderer.pid"
    monkeypatch.setenv("STUB_PID_FILE", str(path))
    return path


@pytest.fixture
def test_settings(tmp_path: Path, stub_renderer: Path, fixed_png: bytes) -> Settings:
    """Settings pointing at the stub renderer."""
    return build_settings(tmp_path, renderer_binary=str(stub_renderer))


@pytest.fixture
def runtime() -> RuntimeEnvironment:
    return RuntimeEnvironment(port=8080)


@pytest.fixture
def app(test_settings: Settings, runtime: RuntimeEnvironment) -> FastAPI:
    """FastAPI application wired to the stub renderer."""
    return create_app(test_settings, runtime)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI test client."""
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async client for issuing concurrent requests."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
