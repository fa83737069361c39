"""Initialize database tables."""
from sqlmodel import SQLModel

from weekly_planner.db.config import engine
from weekly_planner.models.user import User  # noqa: F401
from weekly_planner.models.week import Week  # noqa: F401
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(bind=None):
    """Create all tables in the database."""
    SQLModel.metadata.create_all(bind or engine)
    logger.info("Tables created", tables=sorted(SQLModel.metadata.tables))


if __name__ == "__main__":
    init_db()
