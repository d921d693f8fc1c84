"""
Progress duplicate-collapse job.

Removes duplicate (userId, planId) progress records left over from before
the unique index existed, then creates that index. The earliest created
record (lowest _id) in each group is kept.

Usage:
    python -m jobs.dedupe_progress
    python -m jobs.dedupe_progress --dry-run
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Any, List

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings
from app.progress.services.progress_service import PlanProgressService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class ProgressDedupeJob:
    """
    Collapses duplicate progress records.

    Actions performed:
    1. Groups records by (userId, planId), ordered by _id
    2. For each group with more than one record, deletes all but the first
    3. Creates the unique (userId, planId) index
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        collection_name: str = "user_plan_progress",
        dry_run: bool = False
    ):
        """
        Initialize the dedupe job.

        Args:
            db: MongoDB database holding the progress collection
            collection_name: Progress collection name
            dry_run: Only report duplicates, change nothing
        """
        self._collection = db[collection_name]
        self._progress_service = PlanProgressService(db=db, collection_name=collection_name)
        self._dry_run = dry_run

    async def run(self) -> Dict[str, Any]:
        """
        Execute the dedupe job.

        Returns:
            Dict with job results including counts and any errors
        """
        logger.info(f"Starting progress dedupe job (dry_run={self._dry_run})")
        start_time = datetime.now(timezone.utc)

        results = {
            "startTime": start_time.isoformat(),
            "dryRun": self._dry_run,
            "groupsFound": 0,
            "recordsDeleted": 0,
            "indexCreated": False,
            "errors": [],
        }

        groups = await self._find_duplicate_groups()
        results["groupsFound"] = len(groups)
        logger.info(f"Found {len(groups)} duplicated (userId, planId) groups")

        for group in groups:
            keep_id, *drop_ids = group["ids"]
            key = group["_id"]

            if self._dry_run:
                logger.info(
                    f"Would keep {keep_id} and delete {len(drop_ids)} records "
                    f"for user {key['userId']}, plan {key['planId']}"
                )
                results["recordsDeleted"] += len(drop_ids)
                continue

            try:
                result = await self._collection.delete_many({"_id": {"$in": drop_ids}})
                results["recordsDeleted"] += result.deleted_count
            except Exception as e:
                error_msg = f"Failed to dedupe user {key['userId']}, plan {key['planId']}: {str(e)}"
                logger.error(error_msg)
                results["errors"].append(error_msg)

        if not self._dry_run and not results["errors"]:
            try:
                await self._progress_service.ensure_indexes()
                results["indexCreated"] = True
            except Exception as e:
                error_msg = f"Failed to create unique index: {str(e)}"
                logger.error(error_msg)
                results["errors"].append(error_msg)

        results["endTime"] = datetime.now(timezone.utc).isoformat()
        results["durationSeconds"] = (
            datetime.now(timezone.utc) - start_time
        ).total_seconds()

        logger.info(
            f"Progress dedupe job completed. "
            f"Groups: {results['groupsFound']}, "
            f"Deleted: {results['recordsDeleted']}, "
            f"Errors: {len(results['errors'])}"
        )
        return results

    async def _find_duplicate_groups(self) -> List[Dict[str, Any]]:
        pipeline = [
            {"$sort": {"_id": 1}},
            {"$group": {
                "_id": {"userId": "$userId", "planId": "$planId"},
                "ids": {"$push": "$_id"},
                "count": {"$sum": 1},
            }},
            {"$match": {"count": {"$gt": 1}}},
        ]
        return await self._collection.aggregate(pipeline).to_list(length=None)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Collapse duplicate plan progress records")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="report duplicates without deleting anything",
    )
    return parser.parse_args(argv)


async def main(argv=None):
    """Main entry point for the progress dedupe job."""
    args = parse_args(argv)

    client = AsyncIOMotorClient(settings.MONGODB_URI)
    job = ProgressDedupeJob(
        db=client[settings.MONGODB_DATABASE],
        collection_name=settings.PROGRESS_COLLECTION,
        dry_run=args.dry_run
    )

    try:
        results = await job.run()

        print("\n=== Progress Dedupe Job Results ===")
        print(f"Start Time: {results['startTime']}")
        print(f"End Time: {results['endTime']}")
        print(f"Duration: {results['durationSeconds']:.2f} seconds")
        print(f"Dry Run: {results['dryRun']}")
        print(f"Duplicate Groups: {results['groupsFound']}")
        print(f"Records Deleted: {results['recordsDeleted']}")
        print(f"Unique Index Created: {results['indexCreated']}")

        if results["errors"]:
            print(f"\nErrors ({len(results['errors'])}):")
            for error in results["errors"]:
                print(f"  - {error}")

        sys.exit(1 if results["errors"] else 0)

    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
