"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import devops_app` works.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from devops_app.core.config import DevOpsSettings  # noqa: E402


@pytest.fixture
def settings() -> DevOpsSettings:
    return DevOpsSettings(organization="contoso", project="Web Shop", pat="secret-pat")
