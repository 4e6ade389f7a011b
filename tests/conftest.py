from pathlib import Path
from typing import Callable, Dict, Union

import pytest

from vault_graph.services import config as config_module
from vault_graph.services.config import AppConfig

VaultFiles = Dict[str, Union[str, bytes]]


@pytest.fixture(autouse=True)
def restore_config_cache():
    """
    Ensure configuration cache is cleared between tests.
    """
    config_module.get_config.cache_clear()
    yield
    config_module.get_config.cache_clear()


@pytest.fixture
def write_vault(tmp_path: Path) -> Callable[[VaultFiles], AppConfig]:
    """Write ``{relative_path: content}`` under a fresh vault and return its config."""

    def _write(files: VaultFiles) -> AppConfig:
        root = tmp_path / "vault"
        root.mkdir(exist_ok=True)
        for relative_path, content in files.items():
            target = root / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return AppConfig(vault_path=root)

    return _write
