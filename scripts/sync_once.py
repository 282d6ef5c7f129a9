"""Script to run a single sync cycle against the configured database."""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskboard.config import settings
from taskboard.core.logging import setup_logging
from taskboard.database import AsyncSessionLocal, close_db, init_db
from taskboard.dependencies import build_services, shutdown_services


async def sync_once() -> int:
    """Pull the remote snapshot once and print the merged task list."""
    setup_logging(settings.LOG_LEVEL, "text")
    await init_db()
    services = build_services(AsyncSessionLocal)
    try:
        result = await services.service.sync_tasks()
        if not result.ok:
            print(f"✗ {result.message}")
            return 1

        print(f"✓ Merged {result.data} remote tasks")
        listing = await services.service.list_tasks()
        for task in listing.data or []:
            mark = "x" if task.is_completed else " "
            origin = "remote" if task.synced_with_network else "local"
            print(f"  [{mark}] #{task.id} {task.title} ({origin})")
        return 0
    finally:
        await shutdown_services(services)
        await close_db()


if __name__ == "__main__":
    sys.exit(asyncio.run(sync_once()))
