from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect

from unity_hands.config import get_settings
from unity_hands.db.base import Base
from unity_hands.db.session import engine
from unity_hands.db import models  # noqa: F401


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [settings.data_dir]
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, list[str]]:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
    return {"tables": sorted(inspect(engine).get_table_names())}
