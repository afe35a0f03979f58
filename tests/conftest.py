import os

import pytest

# Console-only, quiet logging for the whole test run
os.environ.setdefault("ENVIRONMENT", "testing")


@pytest.fixture(scope="session")
def reference():
    from ats_scanner.services.reference_data import ReferenceData
    return ReferenceData()
