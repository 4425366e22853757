from pathlib import Path
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, create_engine
from cmdmanifest.config import settings
from cmdmanifest.logging import logger

DB_URL = settings.REGISTRY_DB_URL

engine = create_engine(DB_URL, echo=False)

def init_db():
    url = make_url(DB_URL)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    # Import all models here so SQLModel knows about them
    from cmdmanifest.models import command, alias  # noqa: F401

    logger.info(f"Initializing registry database at {DB_URL}")
    SQLModel.metadata.create_all(engine)
