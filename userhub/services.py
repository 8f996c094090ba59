"""
Process-scoped service container.

Built once in the application lifespan and disposed at shutdown; request
dependencies read it from app.state, and tests substitute fakes.
"""

from userhub.config import Settings
from userhub.database import Database
from userhub.kernel.activity import ActivityLog, RedisActivityLog
from userhub.kernel.identity.jwt import TokenService
from userhub.kernel.storage import ObjectStore, S3ObjectStore
from userhub.logging_config import get_logger

logger = get_logger(__name__)


class AppServices:
    def __init__(
        self,
        database: Database,
        token_service: TokenService,
        object_store: ObjectStore,
        activity_log: ActivityLog,
    ):
        self.database = database
        self.token_service = token_service
        self.object_store = object_store
        self.activity_log = activity_log

    @classmethod
    async def start(cls, settings: Settings) -> "AppServices":
        """Construct every client, create tables and make sure the avatar bucket exists."""
        services = cls(
            database=Database(settings.database_url, echo=settings.debug),
            token_service=TokenService.from_settings(settings),
            object_store=S3ObjectStore.from_settings(settings),
            activity_log=RedisActivityLog.from_settings(settings),
        )
        await services.database.create_all()
        logger.info("Database initialized")
        await services.object_store.ensure_bucket()
        return services

    async def close(self) -> None:
        await self.activity_log.close()
        await self.database.dispose()
        logger.info("Service connections closed")
