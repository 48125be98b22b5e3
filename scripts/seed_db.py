from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from admission_system.database.bootstrap import ensure_super_admin


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    parser = argparse.ArgumentParser(description="Create the first super admin account")
    parser.add_argument("--username", default=getattr(settings, "SEED_ADMIN_USERNAME", "admin"))
    parser.add_argument("--password", default=getattr(settings, "SEED_ADMIN_PASSWORD", ""))
    args = parser.parse_args()

    if not args.password:
        parser.error("a password is required (--password or SEED_ADMIN_PASSWORD)")

    created = ensure_super_admin(db_config, username=args.username, password=args.password)
    print(
        ("OK: Created super admin " if created else "OK: Super admin already present ")
        + f"{args.username!r} -> {db_config.get('host')}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
