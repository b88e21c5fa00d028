"""
MongoDB client for storing and querying parsed codebook tables.

- Connection string and database name from arguments, environment or a .env file
- Atlas URIs get TLS with the certifi CA bundle
"""

from __future__ import annotations

import os
import re
import urllib.parse
from pathlib import Path
from typing import Optional, Dict, Any

import certifi
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection

DEFAULT_DATABASE_NAME = "gss_data"
DEFAULT_CONNECTION_STRING = "mongodb://localhost:27017/"


def load_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Load a .env file into a dictionary (minimal parser)."""
    if not dotenv_path.exists():
        return {}

    values: Dict[str, str] = {}
    for line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if key:
            values[key] = value

    return values


def _safe_uri(uri: str) -> str:
    """Redact password in URI for logs."""
    return re.sub(r"(mongodb(?:\+srv)?://[^:]+):[^@]+@", r"\1:***@", uri)


class MongoDBClient:
    """MongoDB client for database operations."""

    def __init__(
        self,
        connection_string: Optional[str] = None,
        database_name: Optional[str] = None,
        dotenv_path: Optional[Path] = None,
    ):
        if dotenv_path is None:
            project_root = Path(__file__).parent.parent.parent
            dotenv_path = project_root / ".env"

        env_vars = load_dotenv(dotenv_path)

        def _get(key: str) -> Optional[str]:
            raw = os.getenv(key) or env_vars.get(key) or env_vars.get(key.lower())
            return (raw.strip() or None) if raw else None

        full_uri = ((connection_string.strip() or None) if connection_string else None) or _get(
            "MONGODB_CONNECTION_STRING"
        )
        if full_uri:
            self.connection_string = full_uri
        else:
            # Build an Atlas URI from parts when no full URI is given.
            user = _get("MONGODB_USER")
            pwd = _get("MONGODB_PASSWORD")
            cluster = _get("MONGODB_ATLAS_CLUSTER")
            if user and pwd and cluster:
                encoded_pwd = urllib.parse.quote_plus(pwd)
                self.connection_string = f"mongodb+srv://{user}:{encoded_pwd}@{cluster}/"
            else:
                self.connection_string = DEFAULT_CONNECTION_STRING

        raw_db = ((database_name.strip() or None) if database_name else None) or _get("MONGODB_DATABASE_NAME")
        if not raw_db or not raw_db.strip("/\\ "):
            raw_db = DEFAULT_DATABASE_NAME
        self.database_name = raw_db

        self.client: Optional[MongoClient] = None
        self.db: Optional[Database] = None

    @property
    def is_atlas(self) -> bool:
        uri = self.connection_string
        return uri.startswith("mongodb+srv://") or "mongodb.net" in uri

    def _build_kwargs(self) -> Dict[str, Any]:
        """Build kwargs for MongoClient; Atlas gets TLS with the certifi CA bundle."""
        kwargs: Dict[str, Any] = {
            "serverSelectionTimeoutMS": 30000,
            "connectTimeoutMS": 20000,
            "socketTimeoutMS": 20000,
        }
        if self.is_atlas:
            kwargs["tls"] = True
            kwargs["tlsCAFile"] = certifi.where()
        return kwargs

    def connect(self) -> None:
        """Connect to MongoDB and select database."""
        try:
            print("MongoDB URI (safe):", _safe_uri(self.connection_string))
            self.client = MongoClient(self.connection_string, **self._build_kwargs())
            self.client.admin.command("ping")
            self.db = self.client[self.database_name]
            print(f"Connected to MongoDB database: {self.database_name}")
        except Exception as e:
            raise ConnectionError(f"Failed to connect to MongoDB: {e}") from e

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
        self.client = None
        self.db = None
        print("Disconnected from MongoDB")

    def get_collection(self, collection_name: str) -> Collection:
        """Get a collection from the database."""
        if self.db is None:
            raise RuntimeError("Not connected to database. Call connect() first.")
        return self.db[collection_name]

    def create_indexes(self, collection_name: str, indexes: list) -> None:
        """Create indexes on a collection."""
        collection = self.get_collection(collection_name)
        for index_spec in indexes:
            collection.create_index(index_spec)
        print(f"Created indexes on {collection_name}")

    def __enter__(self) -> "MongoDBClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
