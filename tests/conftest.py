"""Pytest configuration for quick_pipreqs tests."""
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src to path for the tests - conftest is in tests/, so parent.parent is project root
project_root = Path(__file__).resolve().parent.parent
src_path = project_root / "src"

# Insert at the very beginning to override any other paths
sys.path.insert(0, str(src_path))

from quick_pipreqs.config import SweepConfig, set_config  # noqa: E402

# Stand-ins for pipreqs, run as `python -c <script>` inside the target directory
SCRIPTS = SimpleNamespace(
    write="open('requirements.txt', 'w').write('requests==2.31.0\\n')",
    copy_backup="import shutil; shutil.copyfile('requirements.txt.bak', 'requirements.txt')",
    nothing="pass",
    fail_in_bad=(
        "import os, sys\n"
        "if os.path.basename(os.getcwd()) == 'bad':\n"
        "    print('boom: cannot parse imports')\n"
        "    sys.exit(3)\n"
        "open('requirements.txt', 'w').write('requests==2.31.0\\n')\n"
    ),
)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Each test starts without a cached global config."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def scripts() -> SimpleNamespace:
    return SCRIPTS


@pytest.fixture
def python_config():
    """Factory for a SweepConfig whose command is this interpreter running a script."""

    def factory(script: str, **kwargs) -> SweepConfig:
        return SweepConfig(command=sys.executable, command_args=("-c", script), **kwargs)

    return factory


@pytest.fixture
def make_tree():
    """Factory that writes ``{relative path: content}`` under a root."""

    def factory(root: Path, files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return factory
