"""
MongoDB connection management.

A single DatabaseConnection is created per application and shared by all
request handlers. It picks the endpoint (Atlas first, then the local
server), falls back from Atlas to the local server on failure, and tracks
connectivity both from its own connect/disconnect calls and from the
driver's topology events.
"""
import logging
import re
import threading
from enum import Enum
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo import monitoring
from pymongo.errors import PyMongoError

from homepage.config import Settings, get_settings
from homepage.core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI = "mongodb://localhost:27017/starbucks"
DEFAULT_MONGO_PORT = 27017

ATLAS_TYPE_LABEL = "MongoDB Atlas (cloud)"
LOCAL_TYPE_LABEL = "Local MongoDB"

_CREDENTIALS_PATTERN = re.compile(r"//.*@")


class ConnectionState(int, Enum):
    """Connection lifecycle; values match the driver ready-state codes."""
    DISCONNECTED = 0
    CONNECTED = 1
    CONNECTING = 2
    DISCONNECTING = 3


class ConnectionInfo(BaseModel):
    """Read-only snapshot of the connection, safe to log or return."""
    is_connected: bool
    database: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    ready_state: int
    connection_string: str
    connection_type: str

    class Config:
        frozen = True


def mask_connection_string(connection_string: str) -> str:
    """Replace embedded credentials with ``***:***``."""
    return _CREDENTIALS_PATTERN.sub("//***:***@", connection_string)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def select_connection_string(settings: Settings) -> str:
    """
    Pick the endpoint to connect to.

    Order: MONGO_ATLAS_URI, then MONGODB_URI, then the built-in local default.
    """
    atlas_uri = _clean(settings.mongo_atlas_uri)
    if atlas_uri:
        return atlas_uri

    local_uri = _clean(settings.mongodb_uri)
    if local_uri:
        return local_uri

    return DEFAULT_MONGO_URI


def fallback_connection_string(settings: Settings) -> str:
    """Local endpoint used when Atlas is unreachable."""
    return _clean(settings.mongodb_uri) or DEFAULT_MONGO_URI


def connection_type_label(connection_string: str) -> str:
    if connection_string.startswith("mongodb+srv"):
        return ATLAS_TYPE_LABEL
    return LOCAL_TYPE_LABEL


def parse_endpoint(connection_string: str) -> tuple[Optional[str], Optional[int], Optional[str]]:
    """
    Extract (host, port, database) from a connection string without I/O.

    Only the first host of a seed list is reported. SRV endpoints have no
    port.
    """
    scheme, sep, rest = connection_string.partition("://")
    if not sep:
        return None, None, None

    authority, _, path = rest.partition("/")
    hosts = authority.rsplit("@", 1)[-1]
    first_host = hosts.split(",")[0]

    host, port = first_host, None
    name, colon, maybe_port = first_host.rpartition(":")
    if colon and maybe_port.isdigit() and not first_host.endswith("]"):
        host, port = name, int(maybe_port)
    elif scheme == "mongodb":
        port = DEFAULT_MONGO_PORT

    database = path.split("?", 1)[0] or None
    return host or None, port, database


class _DriverEventListener(monitoring.TopologyListener, monitoring.ServerHeartbeatListener):
    """
    Forwards PyMongo monitoring events to the owning DatabaseConnection.

    PyMongo calls these from its monitor threads.
    """

    def __init__(self, owner: "DatabaseConnection"):
        self._owner = owner

    # Topology events

    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        pass

    def description_changed(self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        was_available = event.previous_description.has_writable_server()
        is_available = event.new_description.has_writable_server()
        if was_available and not is_available:
            self._owner._on_driver_disconnected()
        elif is_available and not was_available:
            self._owner._on_driver_connected()

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        pass

    # Heartbeat events

    def started(self, event: monitoring.ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: monitoring.ServerHeartbeatSucceededEvent) -> None:
        pass

    def failed(self, event: monitoring.ServerHeartbeatFailedEvent) -> None:
        self._owner._on_driver_error(event.reply)


class DatabaseConnection:
    """
    Owns the application's single MongoDB client.

    Only this class mutates its state. Driver callbacks arrive on PyMongo
    monitor threads, so every mutation goes through ``_lock``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Callable[..., AsyncIOMotorClient] = AsyncIOMotorClient,
    ):
        self.settings = settings or get_settings()
        self.connection_string = select_connection_string(self.settings)
        self.retry_count = 0
        self.max_retries = self.settings.mongo_max_retries

        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._state = ConnectionState.DISCONNECTED
        self._driver_state = ConnectionState.DISCONNECTED
        self._lock = threading.Lock()
        # One listener per manager; handed to every client it builds
        self._listener = _DriverEventListener(self)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def driver_state(self) -> ConnectionState:
        return self._driver_state

    @property
    def client(self) -> Optional[AsyncIOMotorClient]:
        return self._client

    def _set_state(self, state: ConnectionState, driver_state: Optional[ConnectionState] = None) -> None:
        with self._lock:
            self._state = state
            if driver_state is not None:
                self._driver_state = driver_state

    # ------------------------------------------------------------------
    # Driver callbacks
    # ------------------------------------------------------------------

    def _on_driver_error(self, error: Any) -> None:
        logger.error(f"MongoDB connection error: {error}")

    def _on_driver_disconnected(self) -> None:
        with self._lock:
            self._driver_state = ConnectionState.DISCONNECTED
            if self._state is not ConnectionState.CONNECTED:
                return
            self._state = ConnectionState.DISCONNECTED
        logger.warning("MongoDB connection lost")

    def _on_driver_connected(self) -> None:
        with self._lock:
            if self._client is None:
                return
            self._driver_state = ConnectionState.CONNECTED
            if self._state is not ConnectionState.DISCONNECTED:
                return
            self._state = ConnectionState.CONNECTED
        logger.info("MongoDB reconnected")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _build_client(self) -> AsyncIOMotorClient:
        settings = self.settings
        return self._client_factory(
            self.connection_string,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            socketTimeoutMS=settings.mongo_socket_timeout_ms,
            maxPoolSize=settings.mongo_max_pool_size,
            minPoolSize=settings.mongo_min_pool_size,
            retryWrites=True,
            w="majority",
            event_listeners=[self._listener],
        )

    def _release_client(self) -> None:
        client = self._client
        with self._lock:
            self._client = None
            self._database = None
        if client is not None:
            client.close()

    def _can_fall_back(self) -> bool:
        """Only an Atlas endpoint falls back, and only within the retry budget."""
        if not _clean(self.settings.mongo_atlas_uri):
            return False
        if self.connection_string == fallback_connection_string(self.settings):
            return False
        return self.retry_count < self.max_retries

    async def connect(self) -> AsyncIOMotorClient:
        """
        Connect to MongoDB, falling back from Atlas to the local server.

        Returns:
            The connected Motor client

        Raises:
            DatabaseConnectionError: If no endpoint could be reached
        """
        if self._state is ConnectionState.CONNECTED and self._client is not None:
            logger.debug("MongoDB already connected")
            return self._client

        if self._client is not None:
            # Stale client left behind by a driver-side disconnect
            self._release_client()

        masked = mask_connection_string(self.connection_string)
        logger.info(f"Connecting to MongoDB at {masked}")
        self._set_state(ConnectionState.CONNECTING)

        client = None
        try:
            client = self._build_client()
            with self._lock:
                self._client = client
            await client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB connection failed ({masked}): {e}")
            self._release_client()
            self._set_state(ConnectionState.DISCONNECTED, ConnectionState.DISCONNECTED)

            if self._can_fall_back():
                self.retry_count += 1
                self.connection_string = fallback_connection_string(self.settings)
                logger.warning(
                    f"Falling back to local MongoDB "
                    f"(attempt {self.retry_count}/{self.max_retries})"
                )
                return await self.connect()

            raise DatabaseConnectionError(f"Could not connect to MongoDB: {e}") from e

        _, _, database_name = parse_endpoint(self.connection_string)
        database = client.get_database(database_name or self.settings.mongo_db_name)
        with self._lock:
            self._database = database
            self._state = ConnectionState.CONNECTED
            self._driver_state = ConnectionState.CONNECTED
        self.retry_count = 0

        logger.info(f"MongoDB connected (database: {database.name})")
        return client

    async def disconnect(self) -> None:
        """Close the client. Safe to call when already disconnected."""
        if self._client is None:
            logger.debug("MongoDB already disconnected")
            return

        self._set_state(ConnectionState.DISCONNECTING)
        try:
            self._release_client()
        finally:
            self._set_state(ConnectionState.DISCONNECTED, ConnectionState.DISCONNECTED)
        logger.info("MongoDB connection closed")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def is_connection_active(self) -> bool:
        """True only if both our state and the driver report connected."""
        return (
            self._state is ConnectionState.CONNECTED
            and self._driver_state is ConnectionState.CONNECTED
        )

    def ready_state(self) -> ConnectionState:
        """Ready-state code; transitional states win over the driver report."""
        if self._state in (ConnectionState.CONNECTING, ConnectionState.DISCONNECTING):
            return self._state
        if self._client is None:
            return ConnectionState.DISCONNECTED
        return self._driver_state

    def get_database(self) -> AsyncIOMotorDatabase:
        """
        Database handle for the connected client.

        Raises:
            DatabaseConnectionError: If connect() has not succeeded
        """
        database = self._database
        if database is None:
            raise DatabaseConnectionError()
        return database

    def get_connection_info(self) -> ConnectionInfo:
        host, port, database_name = parse_endpoint(self.connection_string)
        if self._database is not None:
            database_name = self._database.name
        elif database_name is None:
            database_name = self.settings.mongo_db_name

        return ConnectionInfo(
            is_connected=self.is_connection_active(),
            database=database_name,
            host=host,
            port=port,
            ready_state=int(self.ready_state()),
            connection_string=mask_connection_string(self.connection_string),
            connection_type=connection_type_label(self.connection_string),
        )
