# app/core/db.py

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.core.config import settings
from app.utils.logger import get_logger

# --- Configure logging ---
logger = get_logger(__name__)

# --- Create declarative base ---
Base = declarative_base()

# --- Asynchronous database setup ---
async_engine = create_async_engine(settings.async_db_url, echo=False, future=True)
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

async def get_async_db():
    """
    Async method for obtaining database session object
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            logger.info("Committing async DB transaction")
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error("Error in async DB transaction", error_message=str(e))
            raise e
        finally:
            await session.close()


async def init_models(engine=async_engine) -> None:
    """
    Create all tables known to the declarative base.
    Existing tables are left untouched.
    """
    # Register every model on Base.metadata before creating tables
    from app.users.models import User  # noqa: F401
    from app.vehicles.models import Vehicle  # noqa: F401
    from app.trips.models import Trip, TripImportLog  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created", tables=sorted(Base.metadata.tables))
    except Exception as e:
        logger.error("Error creating database tables", error_message=str(e))
        raise e
