"""Global pytest configuration and fixtures."""

# Standard library imports
import sys
from pathlib import Path
from unittest.mock import AsyncMock

# Third-party imports
import pytest
from dotenv import load_dotenv

test_env_path = Path(__file__).parent.parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

CONFIG_ENV_VARS = (
    "ENVIRONMENT",
    "DB_DEFAULT_PAGE",
    "DB_DEFAULT_LIMIT",
    "DB_MAX_LIMIT",
    "DB_RETRY_MAX_RETRIES",
    "DB_RETRY_INITIAL_DELAY_MS",
    "DB_BATCH_SIZE",
    "LOG_LEVEL",
    "LOG_FORMAT_TYPE",
    "LOG_FILE",
)


@pytest.fixture
def mock_db_adapter() -> AsyncMock:
    """Provides mock database adapter using qmark placeholders."""
    adapter = AsyncMock()
    adapter.placeholder = "?"
    adapter.has_active_transaction = False
    adapter.fetch_one.return_value = {"count": 0}
    adapter.fetch_all.return_value = []
    adapter.execute_query.return_value = "EXECUTE 1"
    return adapter


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables so defaults apply."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
