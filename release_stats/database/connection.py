import logging
from typing import Optional
from urllib.parse import quote_plus
from tortoise import Tortoise

from release_stats.config import DB_URL, DB_HOST, DB_NAME, DB_USER, DB_PASS, DB_PORT

logger = logging.getLogger(__name__)

MODELS_MODULE = "release_stats.database.models"


class ServiceFactory:
    _initialized: bool = False

    @staticmethod
    def _build_db_url(
        min_size: int = 1,
        max_size: int = 10,
        ssl: Optional[str] = None,
    ) -> str:
        if DB_URL:
            return DB_URL
        user = quote_plus(DB_USER)
        pwd = quote_plus(DB_PASS or "")
        host = DB_HOST
        port = DB_PORT
        db = DB_NAME
        params = [f"min_size={min_size}", f"max_size={max_size}"]
        if ssl:
            params.append(f"ssl={ssl}")
        query = "&".join(params)
        return f"postgres://{user}:{pwd}@{host}:{port}/{db}?{query}"

    @staticmethod
    async def init_orm(
        db_url: Optional[str] = None,
        models_modules: Optional[list[str]] = None,
        generate_schemas: bool = True
    ) -> None:
        """
        Initialize Tortoise ORM with database connection and models.

        Args:
            db_url: Explicit database URL (e.g. "sqlite://:memory:"). Defaults
                    to DB_URL or a postgres URL built from the DB_* settings.
            models_modules: List of module paths containing Tortoise models.
            generate_schemas: Whether to automatically create tables. Default is True.
        """
        if ServiceFactory._initialized:
            return

        db_url = db_url or ServiceFactory._build_db_url(min_size=5, max_size=20)
        modules = {"models": models_modules or [MODELS_MODULE]}

        await Tortoise.init(
            db_url=db_url,
            modules=modules,
            timezone="UTC"
        )

        if generate_schemas:
            await Tortoise.generate_schemas(safe=True)

        ServiceFactory._initialized = True
        logger.info("Database initialized")

    @staticmethod
    async def shutdown() -> None:
        if ServiceFactory._initialized:
            await Tortoise.close_connections()
            ServiceFactory._initialized = False
