from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from student_records.container import build_container
from student_records.database.bootstrap import DEMO_TEACHER, ensure_demo_teacher


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(backend="mysql", db_config=db_config)
    created = ensure_demo_teacher(container)

    print(
        f"OK: Demo teacher {DEMO_TEACHER['email']} {'created' if created else 'already present'} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
