from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from admission_system.container import build_container


def main() -> None:
    """Replace plain-text passwords left in users with werkzeug hashes."""
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))

    count = container.user_service.rehash_plain_passwords()
    print(f"OK: Hashed {count} password(s)")


if __name__ == "__main__":
    main()
