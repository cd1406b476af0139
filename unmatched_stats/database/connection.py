"""Cosmos DB client lifecycle: one client, one database, three containers"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from azure.cosmos import CosmosClient, PartitionKey
from azure.cosmos.container import ContainerProxy
from azure.cosmos.database import DatabaseProxy

from unmatched_stats.config import Settings
from unmatched_stats.database.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

# Every document is addressed by its own id
PARTITION_KEY = PartitionKey(path="/id")


class CosmosDBConnection:
    """
    Owns the Cosmos client for the process.

    ``connect`` provisions the database and containers if they are missing;
    repositories call it lazily, so a store that is down at startup only
    fails the requests that need it.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None
        self._containers: Dict[str, ContainerProxy] = {}
        self._lock = asyncio.Lock()

    @property
    def container_names(self) -> List[str]:
        return [
            self.settings.cosmos_container_users,
            self.settings.cosmos_container_players,
            self.settings.cosmos_container_games,
        ]

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        async with self._lock:
            if self.is_connected:
                return

            logger.info(f"Connecting to Cosmos DB database {self.settings.cosmos_database_name}")
            try:
                await asyncio.get_event_loop().run_in_executor(None, self._provision)
            except Exception as e:
                self._client = None
                self._database = None
                self._containers = {}
                logger.error(f"Cosmos DB connection failed: {e}")
                raise StoreUnavailableError(f"Failed to connect to Cosmos DB: {e}", e)

            logger.info(f"Cosmos DB ready with containers {', '.join(self._containers)}")

    def _provision(self) -> None:
        client = CosmosClient.from_connection_string(self.settings.cosmos_connection_string)
        database = client.create_database_if_not_exists(id=self.settings.cosmos_database_name)
        containers = {
            name: database.create_container_if_not_exists(id=name, partition_key=PARTITION_KEY)
            for name in self.container_names
        }
        self._client, self._database, self._containers = client, database, containers

    async def disconnect(self) -> None:
        async with self._lock:
            if not self.is_connected:
                return
            self._client = None
            self._database = None
            self._containers = {}
            logger.info("Cosmos DB connection closed")

    def get_container(self, container_name: str) -> ContainerProxy:
        try:
            return self._containers[container_name]
        except KeyError:
            raise ValueError(f"Container '{container_name}' not initialized")

    async def health_check(self) -> Dict[str, Any]:
        """Read the database and each container; never raises"""
        if not self.is_connected:
            return {"status": "unhealthy", "error": "Not connected to database"}

        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self._database.read)
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}

        containers = {}
        for name, container in self._containers.items():
            try:
                await loop.run_in_executor(None, container.read)
                containers[name] = "healthy"
            except Exception as e:
                containers[name] = f"error: {e}"

        return {
            "status": "healthy",
            "database": self.settings.cosmos_database_name,
            "containers": containers,
        }
