from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import modules
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from components.accountservice import AccountSettings, build_account_service  # noqa: E402

TEST_SECRET = "test-secret-0123456789abcdef-0123456789"


@pytest.fixture
def settings() -> AccountSettings:
    # Low bcrypt cost keeps the suite fast
    return AccountSettings(AUTH_SECRET=TEST_SECRET, BCRYPT_ROUNDS=4, LOG_LEVEL="WARNING")


@pytest.fixture
def account_service(settings):
    return build_account_service(settings)
