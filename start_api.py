#!/usr/bin/env python3
"""
Run migrations (same process, same DATABASE_URL), then seed, then uvicorn.
Ensures tables exist before seed and app start.
"""
import os
import sys

from skybook.core.config import settings

# 1) Wait for DB (Postgres only; SQLite needs no server)
if settings.DATABASE_URL.startswith("postgresql"):
    import wait_for_db  # noqa: F401

# 2) Run migrations using the same settings as the app
from alembic.config import Config
from alembic import command

alembic_cfg = Config(os.path.join(os.path.dirname(__file__), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
command.upgrade(alembic_cfg, "head")

# 3) Seed using an engine created *after* migrations (avoids app engine created during Alembic env load)
from sqlalchemy.orm import sessionmaker
from skybook.db.session import make_engine
seed_engine = make_engine(settings.DATABASE_URL)
SeedSession = sessionmaker(autocommit=False, autoflush=False, bind=seed_engine)
from skybook.seed import run as run_seed
run_seed(SeedSession())
seed_engine.dispose()

# 4) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "skybook.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)
