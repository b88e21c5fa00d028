"""Load parsed GSS codebook tables into MongoDB."""

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from .mongodb_client import MongoDBClient

CODEBOOKS_COLLECTION = "codebooks"
VARIABLES_COLLECTION = "variables"
TABLE_FILE_NAME = "gss_doc.json"


def load_codebook_to_mongodb(
    table_path: Path,
    mongodb_client: MongoDBClient,
    source: Optional[str] = None,
) -> int:
    """Load a single codebook table JSON file into MongoDB.

    The table summary (counts, failures) goes to the ``codebooks`` collection
    and each variable becomes one document in ``variables``. Variables of the
    source are replaced wholesale, since every run regenerates the table.

    Args:
        table_path: Path to gss_doc.json
        mongodb_client: MongoDB client instance
        source: Source identifier (read from the file if not provided)

    Returns:
        Number of variable documents written
    """
    if not table_path.exists():
        raise FileNotFoundError(f"Codebook table not found: {table_path}")

    with open(table_path, "r", encoding="utf-8") as f:
        table_data = json.load(f)

    source = source or table_data.get("source") or table_path.parent.name
    records = table_data.get("records", [])
    print(f"Loading codebook table: {table_path}")
    print(f"  Source: {source}, variables: {len(records)}")

    summary = {k: v for k, v in table_data.items() if k != "records"}
    summary["source"] = source
    summary["_loaded_at"] = datetime.now().isoformat()
    summary["_file_path"] = str(table_path)

    codebooks = mongodb_client.get_collection(CODEBOOKS_COLLECTION)
    existing = codebooks.find_one({"source": source})
    if existing:
        codebooks.update_one({"_id": existing["_id"]}, {"$set": summary})
        print(f"  Updated existing codebook document (ID: {existing['_id']})")
    else:
        result = codebooks.insert_one(summary)
        print(f"  Inserted new codebook document (ID: {result.inserted_id})")

    variables = mongodb_client.get_collection(VARIABLES_COLLECTION)
    variables.delete_many({"source": source})
    docs = [dict(record, source=source, position=i) for i, record in enumerate(records)]
    if docs:
        variables.insert_many(docs)
    print(f"  Loaded {len(docs)} variables")
    return len(docs)


def load_all_codebooks(
    parsed_dir: Path,
    mongodb_client: MongoDBClient,
    source_filter: Optional[str] = None,
) -> int:
    """Load every parsed/<source>/gss_doc.json under parsed_dir.

    Returns:
        Number of tables loaded
    """
    table_files = sorted(parsed_dir.glob(f"*/{TABLE_FILE_NAME}"))
    if source_filter:
        table_files = [p for p in table_files if p.parent.name == source_filter]
    if not table_files:
        print(f"No codebook tables found in {parsed_dir}")
        return 0

    loaded = 0
    for table_file in table_files:
        try:
            load_codebook_to_mongodb(table_file, mongodb_client, source=table_file.parent.name)
            loaded += 1
        except (OSError, ValueError) as e:
            print(f"  ERROR: Failed to load {table_file}: {e}")
            continue
    return loaded


def create_indexes(mongodb_client: MongoDBClient) -> None:
    """Create indexes on MongoDB collections for better query performance."""
    print("Creating indexes...")

    mongodb_client.create_indexes(CODEBOOKS_COLLECTION, [
        [("source", 1)],
    ])

    mongodb_client.create_indexes(VARIABLES_COLLECTION, [
        [("source", 1), ("id", 1)],
        [("source", 1), ("position", 1)],
        [("id", 1)],
        [("page", 1)],
    ])

    print("Indexes created successfully")


def main():
    """Main entry point for loading codebook tables into MongoDB."""
    parser = argparse.ArgumentParser(
        description="Load parsed GSS codebook tables into MongoDB"
    )
    parser.add_argument(
        "--parsed-dir",
        type=Path,
        default=Path(__file__).parent.parent.parent / "data" / "parsed",
        help="Directory containing parsed codebook JSON files",
    )
    parser.add_argument(
        "--source",
        type=str,
        help="Load only a specific source (e.g., gss_cumulative)",
    )
    parser.add_argument(
        "--connection-string",
        type=str,
        help="MongoDB connection string (overrides env vars)",
    )
    parser.add_argument(
        "--database-name",
        type=str,
        help="MongoDB database name (overrides env vars)",
    )
    parser.add_argument(
        "--create-indexes",
        action="store_true",
        help="Create indexes on collections",
    )

    args = parser.parse_args()

    with MongoDBClient(
        connection_string=args.connection_string,
        database_name=args.database_name,
    ) as client:
        if args.create_indexes:
            create_indexes(client)
            print()

        n = load_all_codebooks(args.parsed_dir, client, source_filter=args.source)

        count = client.get_collection(VARIABLES_COLLECTION).count_documents({})
        print("=" * 60)
        print(f"Loaded {n} codebook table(s)")
        print(f"Total variables in database: {count}")
        print(f"Database: {client.database_name}")


if __name__ == "__main__":
    main()
