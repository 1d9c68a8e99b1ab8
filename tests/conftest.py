from __future__ import annotations

import pytest

from digital_twin.app.credentials.service import reset_credential_store


@pytest.fixture(autouse=True)
def reset_provider_credentials() -> None:
    reset_credential_store()
