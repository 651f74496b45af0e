from __future__ import annotations

import pytest

from builders import NOW
from core.windows import FixedClock


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)
