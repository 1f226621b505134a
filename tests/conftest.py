import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
DATA_DIR = pathlib.Path(__file__).resolve().parent / "data"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from lsp_tools.tools.fs import AllowedRoots, PathSandbox  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_lsp_tools_home(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path):
    """Point LSP_TOOLS_HOME at a temporary directory so we never read the real config."""

    monkeypatch.setenv("LSP_TOOLS_HOME", str(tmp_path / ".lsp-tools-home"))
    monkeypatch.delenv("LSP_TOOLS_ALLOWED_DIRS", raising=False)
    monkeypatch.delenv("LSP_TOOLS_LOG_LEVEL", raising=False)
    yield


@pytest.fixture
def sandbox_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """A real (symlink-free) directory used as the single allowed root."""

    root = tmp_path.resolve() / "root"
    root.mkdir()
    return root


@pytest.fixture
def sandbox(sandbox_root: pathlib.Path) -> PathSandbox:
    return PathSandbox(AllowedRoots.from_paths([sandbox_root]))


@pytest.fixture
def sample_file() -> pathlib.Path:
    return DATA_DIR / "sample.txt"
