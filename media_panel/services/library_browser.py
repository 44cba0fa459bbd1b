"""Music library browsing (genre -> artist -> album -> track).

Browsing is a plain request/response descent with no synchronization
concerns: each level is one ``get-direct-children`` call keyed by the parent
node id. Successful listings are cached for a short while because the
library changes far less often than the play queue.
"""

from pydantic import TypeAdapter, ValidationError

from media_panel.cache import SimpleCache, cached, get_cache
from media_panel.exceptions import DeviceRemoteException
from media_panel.logging_config import get_logger, log_with_context
from media_panel.models.device import LibraryNode
from media_panel.protocols import CommandGatewayProtocol
from media_panel.services.command_gateway import Command, raise_for_failure
from media_panel.state_managers import DeviceStateStore

logger = get_logger(__name__)

CACHE_PREFIX = "library:"

_nodes_adapter = TypeAdapter(list[LibraryNode])


class LibraryBrowser:
    """Fetches library listings through the command gateway."""

    def __init__(
        self,
        gateway: CommandGatewayProtocol,
        store: DeviceStateStore,
        cache: SimpleCache | None = None,
        cache_ttl_seconds: int = 60,
    ):
        self._gateway = gateway
        self._store = store
        self._cache = cache if cache is not None else get_cache()
        self._cache_ttl_seconds = cache_ttl_seconds

    async def genres(self, refresh: bool = False) -> list[LibraryNode]:
        """Top level of the taxonomy.

        Args:
            refresh: Re-fetch from the device instead of using the genres
                loaded at startup

        Raises:
            DeviceRemoteException: The device reported an error
            DeviceTransportException: The device could not be reached
        """
        if refresh or not self._store.genres:
            result = await self._gateway.send(Command.GET_ALL_GENRES)
            await self._store.apply_genres(result)
            raise_for_failure(result, Command.GET_ALL_GENRES.value)
        return list(self._store.genres)

    async def children(self, root: str) -> list[LibraryNode]:
        """Direct children of the library node ``root``.

        Raises:
            DeviceRemoteException: The device reported an error or sent a bad listing
            DeviceTransportException: The device could not be reached
        """

        async def fetch() -> list[LibraryNode]:
            result = await self._gateway.send(Command.GET_DIRECT_CHILDREN, {"root": root})
            await self._store.apply_command(result, Command.GET_DIRECT_CHILDREN.value)
            value = raise_for_failure(result, Command.GET_DIRECT_CHILDREN.value)
            try:
                return _nodes_adapter.validate_python(value or [])
            except ValidationError as e:
                message = f"Malformed get-direct-children reply: {e.error_count()} errors"
                await self._store.record_error(message, Command.GET_DIRECT_CHILDREN.value)
                raise DeviceRemoteException(message, details={"root": root}) from e

        nodes = await cached(self._cache, f"{CACHE_PREFIX}children:{root}", self._cache_ttl_seconds, fetch)
        log_with_context(
            logger,
            "debug",
            "Library listing",
            root=root,
            count=len(nodes),
            event_type="library_children",
        )
        return nodes

    async def invalidate(self) -> int:
        """Forget cached listings so the next descent goes to the device."""
        return await self._cache.clear(CACHE_PREFIX)
