import os
import sys
import tempfile
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests off the real data/ and logs/ directories and off remote stores.
_RUNTIME_DIR = Path(tempfile.mkdtemp(prefix="focusmate-tests-"))
os.environ.setdefault("FOCUSMATE_DATA_DIR", str(_RUNTIME_DIR / "data"))
os.environ.setdefault("FOCUSMATE_LOG_DIR", str(_RUNTIME_DIR / "logs"))
os.environ["FOCUSMATE_STORE_BACKEND"] = "memory"
