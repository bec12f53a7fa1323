from app.core.config import get_settings
from loguru import logger
from sqlmodel import Session

from app.database.database import engine, create_db_and_tables
from app.database.init_sample_data import init_sample_data


def init() -> None:
    """
    Create the database schema and, outside production, seed the sample dataset.
    """
    with Session(engine) as session:
        create_db_and_tables()
        if get_settings().ENVIRONMENT.lower() != "production":
            init_sample_data(session)


def main() -> None:
    """
    Create the database schema and seed initial data while logging progress.
    """
    logger.info("Creating initial data")
    init()
    logger.info("Initial data created")


if __name__ == "__main__":
    main()
