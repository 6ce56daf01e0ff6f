import sys
from pathlib import Path

import pytest

# Ensure backend package is importable for tests
BACKEND_ROOT = Path(__file__).resolve().parents[1]
REPO_ROOT = BACKEND_ROOT.parent
for path in (BACKEND_ROOT, REPO_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from backend.eliza.engine.session import new_session  # noqa: E402
from backend.eliza.script.doctor import load_doctor_script  # noqa: E402


@pytest.fixture(scope="session")
def doctor_script():
    return load_doctor_script()


@pytest.fixture
def doctor(doctor_script):
    return new_session(doctor_script)
