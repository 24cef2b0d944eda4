import os
import random

import pytest

# charts are written to files only
os.environ.setdefault("MPLBACKEND", "Agg")


@pytest.fixture
def rng():
    return random.Random(456)
