"""
Base service class for the draft clock service

Provides common read/write operations and error handling for all data services.
"""
import logging
from typing import Optional, Type, TypeVar, Generic, Dict, Any, List, Tuple

from api.client import get_global_client, APIClient
from models.base import FantasyBaseModel
from exceptions import APIException

logger = logging.getLogger(f'{__name__}.BaseService')

T = TypeVar('T', bound=FantasyBaseModel)


class BaseService(Generic[T]):
    """
    Base service class providing common operations for fantasy models.

    Features:
    - Generic type support for any FantasyBaseModel subclass
    - Automatic model validation and conversion
    - Standardized error handling (APIException and subclasses pass through)
    - API response format handling (count + list format)
    - Connection management via global client
    """

    def __init__(self,
                 model_class: Type[T],
                 endpoint: str,
                 client: Optional[APIClient] = None):
        """
        Initialize base service.

        Args:
            model_class: Pydantic model class for this service
            endpoint: API endpoint path (e.g., 'players', 'fantasyteams')
            client: Optional API client override (uses global client by default)
        """
        self.model_class = model_class
        self.endpoint = endpoint
        self._client = client
        self._cached_client: Optional[APIClient] = None

        logger.debug(f"Initialized {self.__class__.__name__} for {model_class.__name__} at endpoint '{endpoint}'")

    async def get_client(self) -> APIClient:
        """
        Get API client instance with caching to reduce async overhead.

        Returns:
            APIClient instance (cached after first access)
        """
        if self._client:
            return self._client

        if self._cached_client is None:
            self._cached_client = await get_global_client()

        return self._cached_client

    def _to_model(self, data: Dict[str, Any]) -> T:
        return self.model_class.from_api_data(data)

    async def get_by_id(self, object_id: int) -> Optional[T]:
        """
        Get single object by ID.

        Args:
            object_id: Unique identifier for the object

        Returns:
            Model instance or None if not found

        Raises:
            APIException: For API errors
        """
        try:
            client = await self.get_client()
            data = await client.get(self.endpoint, object_id=object_id)

            if not data:
                logger.debug(f"{self.model_class.__name__} {object_id} not found")
                return None

            model = self._to_model(data)
            logger.debug(f"Retrieved {self.model_class.__name__} {object_id}: {model!r}")
            return model

        except APIException:
            logger.error(f"API error retrieving {self.model_class.__name__} {object_id}")
            raise
        except Exception as e:
            logger.error(f"Error retrieving {self.model_class.__name__} {object_id}: {e}")
            raise APIException(f"Failed to retrieve {self.model_class.__name__}: {e}")

    async def get_all(self, params: Optional[List[tuple]] = None) -> Tuple[List[T], int]:
        """
        Get all objects with optional query parameters.

        Args:
            params: Query parameters as list of (key, value) tuples

        Returns:
            Tuple of (list of model instances, total count)

        Raises:
            APIException: For API errors
        """
        try:
            client = await self.get_client()
            data = await client.get(self.endpoint, params=params)

            if not data:
                logger.debug(f"No {self.model_class.__name__} objects found")
                return [], 0

            items, count = self._extract_items_and_count_from_response(data)

            models = [self._to_model(item) for item in items]
            logger.debug(f"Retrieved {len(models)} of {count} {self.model_class.__name__} objects")
            return models, count

        except APIException:
            logger.error(f"API error retrieving {self.model_class.__name__} list")
            raise
        except Exception as e:
            logger.error(f"Error retrieving {self.model_class.__name__} list: {e}")
            raise APIException(f"Failed to retrieve {self.model_class.__name__} list: {e}")

    async def get_all_items(self, params: Optional[List[tuple]] = None) -> List[T]:
        """Get all objects (convenience method that only returns the list)."""
        items, _ = await self.get_all(params=params)
        return items

    async def create(self, model_data: Dict[str, Any]) -> Optional[T]:
        """
        Create new object from data dictionary.

        Args:
            model_data: Dictionary of model fields

        Returns:
            Created model instance or None

        Raises:
            PersistenceConflict: If the API rejected a conditional create
            APIException: For API errors
        """
        try:
            client = await self.get_client()
            response = await client.post(self.endpoint, model_data)

            if not response:
                logger.warning(f"No response from {self.model_class.__name__} creation at '{self.endpoint}'")
                return None

            model = self._to_model(response)
            logger.debug(f"Created {self.model_class.__name__}: {model!r}")
            return model

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Error creating {self.model_class.__name__}: {e}")
            raise APIException(f"Failed to create {self.model_class.__name__}: {e}")

    async def patch(
        self,
        object_id: int,
        model_data: Dict[str, Any],
        params: Optional[List[tuple]] = None
    ) -> Optional[T]:
        """
        Update existing object with HTTP PATCH.

        Args:
            object_id: ID of object to update
            model_data: Dictionary of fields to update
            params: Query parameters (preconditions for conditional updates)

        Returns:
            Updated model instance or None if not found

        Raises:
            PersistenceConflict: If a precondition no longer held
            APIException: For API errors
        """
        try:
            client = await self.get_client()
            response = await client.patch(self.endpoint, model_data, object_id, params=params)

            if not response:
                logger.debug(f"{self.model_class.__name__} {object_id} not found for update")
                return None

            model = self._to_model(response)
            logger.debug(f"Updated {self.model_class.__name__} {object_id}: {model!r}")
            return model

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Error updating {self.model_class.__name__} {object_id}: {e}")
            raise APIException(f"Failed to update {self.model_class.__name__}: {e}")

    def _extract_items_and_count_from_response(self, data: Any) -> Tuple[List[Dict[str, Any]], int]:
        """
        Extract items list and count from API response.

        Expected format: {'count': int, '<endpoint>': [...]}
        Single object format: {'id': 1, 'name': '...'}

        Args:
            data: API response data

        Returns:
            Tuple of (items list, total count)
        """
        if isinstance(data, list):
            return data, len(data)

        if not isinstance(data, dict):
            logger.warning(f"Unexpected response format for {self.model_class.__name__}: {type(data)}")
            return [], 0

        count = data.get('count', 0)

        field_candidates = [self.endpoint, 'items', 'data', 'results']
        for field_name in field_candidates:
            if field_name in data and isinstance(data[field_name], list):
                return data[field_name], count or len(data[field_name])

        if 'id' in data:
            return [data], 1

        return [], count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_class.__name__}, endpoint='{self.endpoint}')"
