import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path so tests can import the package directly
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


def pytest_configure(config):
    """Drop KINSHIP_* overrides from the environment.

    The web app loads its configuration at import time; tests expect the
    packaged defaults, not whatever the developer's shell exports.
    """
    for key in list(os.environ):
        if key.startswith("KINSHIP_"):
            os.environ.pop(key, None)
