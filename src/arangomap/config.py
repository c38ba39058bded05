# src/arangomap/config.py
"""
Module Description:
Defines the central configuration dictionary (CONFIG) for arangomap.
Loads settings from environment variables using python-dotenv for the database
connection, the static-schema flag and logging. Includes a validation function
to check that the connection settings are present.

Links:
- python-dotenv: https://github.com/theskumar/python-dotenv

Sample Input/Output:

- Accessing config values:
  from arangomap.config import CONFIG
  db_host = CONFIG["arango"]["host"]
  is_static = CONFIG["arango"]["static"]

- Running validation:
  python -m arangomap.config
  (Prints validation status and exits with 0 or 1)
"""
import os
import sys

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


CONFIG = {
    "arango": {
        "host": os.getenv("ARANGO_HOST", "http://localhost:8529"),
        "user": os.getenv("ARANGO_USER", "root"),
        "password": os.getenv("ARANGO_PASSWORD", ""),
        "db_name": os.getenv("ARANGO_DB_NAME", "_system"),
        # Collections are created by migrations, never on first write
        "static": env_flag("ARANGO_STATIC"),
    },
    "logging": {
        "level": os.getenv("ARANGOMAP_LOG_LEVEL", "INFO"),
    },
}

REQUIRED_ARANGO_KEYS = ("host", "user", "db_name")


def validate_config() -> bool:
    """
    Validate that required connection settings are set.
    Returns True if valid, False otherwise. Logs errors.
    """
    missing = [
        f"ARANGO_{key.upper()}" for key in REQUIRED_ARANGO_KEYS if not CONFIG["arango"][key]
    ]

    if missing:
        logger.error(f"Missing ArangoDB environment variables: {', '.join(missing)}")
        return False

    logger.info("Configuration environment variables validated successfully.")
    return True


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stderr, level="INFO")

    logger.info("Running configuration validation...")
    if validate_config():
        print("✅ VALIDATION COMPLETE - Required environment variables are set.")
        sys.exit(0)
    else:
        print("❌ VALIDATION FAILED - Missing required environment variables. See logs for details.")
        sys.exit(1)
