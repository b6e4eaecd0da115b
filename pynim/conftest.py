import pytest

from pynim import Config, configure, project_root

# tests log everything, including raw traffic, to a file instead of the console
TEST_CONFIG = Config(logging=Config.Logging(level=5, log_dir=project_root() / "test_logs"))


@pytest.fixture(autouse=True)
def setup_test_config():
  configure(TEST_CONFIG)
  yield
