from pathlib import Path
import shutil
import pytest


DATA_DIR = Path(__file__).parent / "data"


def pytest_addoption(parser):
    parser.addoption("--runslow", action="store_true", default=False, help="run slow tests")

def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark test as slow to run")

def pytest_collection_modifyitems(config, items):

    if config.getoption("--runslow"):
        return

    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)

@pytest.fixture
def tmp_context(tmp_path):
    """This fixture is used to create a context where all test versions are installed.
    """

    from mcresolve.standard import Context

    context = Context(tmp_path / "main")
    for version_file in (DATA_DIR / "versions").glob("*.json"):
        version_dir = context.versions_dir / version_file.stem
        version_dir.mkdir(parents=True)
        shutil.copy(version_file, version_dir / version_file.name)

    return context

@pytest.fixture
def linux():
    from mcresolve.probe import PlatformInfo
    return PlatformInfo("linux", "5.15.0-generic", "x86_64")

@pytest.fixture
def windows():
    from mcresolve.probe import PlatformInfo
    return PlatformInfo("windows", "10.0.19045", "x86_64")

@pytest.fixture
def osx():
    from mcresolve.probe import PlatformInfo
    return PlatformInfo("osx", "13.4", "arm64")
