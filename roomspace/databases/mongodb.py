from typing import List, Optional, Sequence, Type
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie, Document
from pymongo.errors import ServerSelectionTimeoutError

from roomspace.configs.settings import settings
from roomspace.utils.logging import get_logger

logger = get_logger(__name__)


class MongoDB:
    """MongoDB connection manager; registers the document models with Beanie"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database = None

    async def attach(self, client, document_models: Sequence[Type[Document]], db_name: Optional[str] = None):
        """Bind an already created (possibly in-memory) client and initialize Beanie on it"""
        self.client = client
        self.database = client[db_name or settings.MONGO_DB]
        await init_beanie(database=self.database, document_models=list(document_models))
        logger.info(f"Beanie initialized with {len(document_models)} document models on '{db_name or settings.MONGO_DB}'")
        return self.database

    async def connect(self, document_models: List[Type[Document]]):
        """Connect to the configured server, check it answers and initialize Beanie"""
        client = AsyncIOMotorClient(
            settings.MONGO_URL,
            serverSelectionTimeoutMS=8000,
            connectTimeoutMS=8000,
            socketTimeoutMS=10000,
            maxPoolSize=50,
            minPoolSize=0,
        )
        try:
            await client.admin.command('ping')
        except ServerSelectionTimeoutError as e:
            logger.error(f"Failed to connect to MongoDB (timeout) at {settings.MONGO_HOST or 'localhost'}:{settings.MONGO_PORT}: {e}")
            client.close()
            raise ConnectionError("Cannot connect to MongoDB server")

        return await self.attach(client, document_models)

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("Disconnected from MongoDB")


mongodb = MongoDB()
