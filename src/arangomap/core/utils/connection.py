"""
ArangoDB connection utilities.

This module provides functions for connecting to ArangoDB, making sure the
target database exists, and bundling the database handle with the store
settings (`Store`) that the rest of arangomap receives as its connection.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

from arango import ArangoClient
from arango.database import StandardDatabase

from arangomap.config import CONFIG
from arangomap.core.schema import SchemaRegistry, registry as default_registry


@dataclass
class Store:
    """
    Connection handle passed to every arangomap operation.

    Attributes:
        db: python-arango database handle.
        static: If True collections are managed externally (migrations) and a
            missing collection is a fatal error instead of being created.
        registry: Record type registry used for edge synthesis.
    """

    db: StandardDatabase
    static: bool = False
    registry: SchemaRegistry = field(default=default_registry)


def connect_arango(hosts: Optional[str] = None) -> ArangoClient:
    """
    Connect to ArangoDB server.

    Args:
        hosts: ArangoDB host URL(s) (default: CONFIG / ARANGO_HOST)

    Returns:
        ArangoClient instance

    Raises:
        ConnectionError: If connection fails
    """
    if hosts is None:
        hosts = CONFIG["arango"]["host"]

    try:
        client = ArangoClient(hosts=hosts)
        logger.info(f"Connected to ArangoDB at {hosts}")
        return client
    except Exception as e:
        error_msg = f"Failed to connect to ArangoDB at {hosts}: {str(e)}"
        logger.error(error_msg)
        raise ConnectionError(error_msg) from e


def ensure_database(
    client: ArangoClient,
    name: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> StandardDatabase:
    """
    Ensure that the database exists, creating it if necessary.

    Args:
        client: ArangoClient instance
        name: Database name (default: CONFIG / ARANGO_DB_NAME)
        username: Username for authentication (default: CONFIG / ARANGO_USER)
        password: Password for authentication (default: CONFIG / ARANGO_PASSWORD)

    Returns:
        Database instance

    Raises:
        RuntimeError: If database creation fails
    """
    settings: Dict[str, Any] = CONFIG["arango"]
    name = name or settings["db_name"]
    username = username or settings["user"]
    password = settings["password"] if password is None else password

    try:
        sys_db = client.db("_system", username=username, password=password)

        if name != "_system" and not sys_db.has_database(name):
            sys_db.create_database(name)
            logger.info(f"Created database '{name}'")

        db = client.db(name, username=username, password=password)
        logger.info(f"Connected to database '{name}'")
        return db
    except Exception as e:
        error_msg = f"Failed to ensure database '{name}': {str(e)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg) from e


def connect_store(
    hosts: Optional[str] = None,
    database: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    static: Optional[bool] = None,
    registry: Optional[SchemaRegistry] = None,
) -> Store:
    """Build a Store from explicit values, falling back to CONFIG."""
    client = connect_arango(hosts)
    db = ensure_database(client, database, username, password)
    if static is None:
        static = CONFIG["arango"]["static"]
    return Store(db=db, static=static, registry=registry or default_registry)
