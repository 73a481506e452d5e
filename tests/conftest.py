import sys
from pathlib import Path

import pytest
import simpy

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def env():
    return simpy.Environment()
