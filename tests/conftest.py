from collections.abc import Iterator
from pathlib import Path

import pytest

from mycodash.core.config import ConfigManager
from mycodash.core.global_paths import GlobalPath
from mycodash.tui.theme import ThemeManager
from mycodash.util.log import Log


@pytest.fixture(autouse=True)
def config_context() -> Iterator[None]:
    token = ConfigManager.provide(ConfigManager())
    try:
        yield
    finally:
        ConfigManager.restore(token)


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    root = tmp_path / "home"
    monkeypatch.setattr(GlobalPath, "config", classmethod(lambda cls: str(root / "config")))
    monkeypatch.setattr(GlobalPath, "state", classmethod(lambda cls: str(root / "state")))
    monkeypatch.setattr(GlobalPath, "data", classmethod(lambda cls: str(root / "data")))
    monkeypatch.delenv("MYCODASH_CONFIG_CONTENT", raising=False)
    yield root
    Log.close()


@pytest.fixture(autouse=True)
def _theme_teardown() -> Iterator[None]:
    yield
    ThemeManager._mode = "dark"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"
