"""Base repository class with common database operations"""

import asyncio
import logging
import uuid
from typing import Optional, List, Dict, Any
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError
from azure.cosmos.container import ContainerProxy

from unmatched_stats.database.connection import CosmosDBConnection
from unmatched_stats.database.exceptions import (
    DatabaseError,
    ItemNotFoundError,
    DuplicateItemError,
    handle_cosmos_error,
)

logger = logging.getLogger(__name__)


def is_valid_id(value: Any) -> bool:
    """Ids are UUID strings; anything else can never name a stored document"""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class BaseRepository:
    """Common CRUD operations over one container partitioned on /id"""

    def __init__(self, connection: CosmosDBConnection, container_name: str):
        self.db = connection
        self.container_name = container_name

    async def _get_container(self) -> ContainerProxy:
        if not self.db.is_connected:
            await self.db.connect()
        return self.db.get_container(self.container_name)

    async def _run(self, func, *args, **kwargs):
        # The Cosmos SDK is synchronous; keep it off the event loop
        return await asyncio.get_event_loop().run_in_executor(
            None, lambda: func(*args, **kwargs)
        )

    async def create(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new item in the database"""
        try:
            container = await self._get_container()
            result = await self._run(container.create_item, body=item)
            logger.info(f"Created item with id: {item.get('id')} in {self.container_name}")
            return result

        except CosmosHttpResponseError as e:
            if e.status_code == 409:
                raise DuplicateItemError(f"Item with id {item.get('id')} already exists", e)
            logger.error(f"Error creating item in {self.container_name}: {e}")
            raise handle_cosmos_error(e)

    async def get_by_id(self, item_id: str) -> Optional[Dict[str, Any]]:
        """Point-read an item; None when it does not exist"""
        if not is_valid_id(item_id):
            return None
        try:
            container = await self._get_container()
            return await self._run(container.read_item, item=item_id, partition_key=item_id)

        except CosmosResourceNotFoundError:
            return None
        except CosmosHttpResponseError as e:
            logger.error(f"Error reading item {item_id} from {self.container_name}: {e}")
            raise handle_cosmos_error(e)

    async def patch(self, item_id: str, operations: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Apply patch operations to one item in a single server-side write"""
        try:
            container = await self._get_container()
            result = await self._run(
                container.patch_item,
                item=item_id,
                partition_key=item_id,
                patch_operations=operations,
            )
            logger.debug(f"Patched item {item_id} in {self.container_name}: {operations}")
            return result

        except CosmosResourceNotFoundError as e:
            raise ItemNotFoundError(f"Item with id {item_id} not found", e)
        except CosmosHttpResponseError as e:
            logger.error(f"Error patching item {item_id} in {self.container_name}: {e}")
            raise handle_cosmos_error(e)

    async def delete(self, item_id: str) -> None:
        """Delete an item; deleting a missing item is not an error"""
        try:
            container = await self._get_container()
            await self._run(container.delete_item, item=item_id, partition_key=item_id)
            logger.debug(f"Deleted item {item_id} from {self.container_name}")

        except CosmosResourceNotFoundError:
            pass
        except CosmosHttpResponseError as e:
            logger.error(f"Error deleting item {item_id} from {self.container_name}: {e}")
            raise handle_cosmos_error(e)

    async def query(self, query: str, parameters: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Execute a SQL query against the container"""
        try:
            container = await self._get_container()

            query_kwargs = {
                'query': query,
                'enable_cross_partition_query': True,
            }
            if parameters:
                query_kwargs['parameters'] = parameters

            return await self._run(lambda: list(container.query_items(**query_kwargs)))

        except CosmosHttpResponseError as e:
            logger.error(f"Error executing query in {self.container_name}: {e}")
            raise DatabaseError(f"Failed to execute query: {str(e)}", e)

    async def exists(self, item_id: str) -> bool:
        """Check if an item exists"""
        item = await self.get_by_id(item_id)
        return item is not None
