from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "boardcal"
APP_AUTHOR = "boardcal"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
LOCAL_STORE_FILE = DATA_DIR / "calendar.json"
LOG_FILE = DATA_DIR / "boardcal.log"


def ensure_data_dir(path: Path = DATA_DIR) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
