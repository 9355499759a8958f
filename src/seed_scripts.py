"""
seed_scripts.py - Store the built-in preset animations

Usage (from src/):
    python seed_scripts.py

Presets already stored (matched by title) are skipped.
"""

import asyncio
import sys

from utils.logger import get_logger, configure_logger
from managers import ConfigManager
from models.enums import LogCategory
from services import build_services

log = get_logger().for_category(LogCategory.SCRIPT)


async def seed() -> int:
    config = ConfigManager().load()
    configure_logger(config.logging.level, config.logging.use_colors)

    services = build_services(config)
    seeded = await services.script_service.seed_presets()

    log.info(f"Seeding complete: {len(seeded)} presets added")
    return len(seeded)


if __name__ == "__main__":
    try:
        asyncio.run(seed())
    except Exception as e:
        log.error(f"Seeding failed: {e}", error_type=type(e).__name__)
        sys.exit(1)
