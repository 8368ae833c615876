"""
Seed Reference Data Script
Populates the global environments and maintenance_command_types tables.
Safe to re-run: existing rows (matched on slug) are updated in place.

Run with: python -m cloud_tracker.scripts.seed_reference_data
"""

import sys
from cloud_tracker.database.supabase_client import get_service_supabase
from supabase import Client
from typing import Any, Dict, List
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ENVIRONMENTS = [
    {"name": "Development", "slug": "development", "sort_order": 1},
    {"name": "Staging", "slug": "staging", "sort_order": 2},
    {"name": "Production", "slug": "production", "sort_order": 3},
]

MAINTENANCE_COMMAND_TYPES = [
    {
        "name": "Security Review",
        "slug": "security-review",
        "description": "Audit dependencies, secrets and auth flows",
        "recommended_frequency_days": 7,
        "sort_order": 1,
    },
    {
        "name": "Dependency Updates",
        "slug": "dependency-updates",
        "description": "Upgrade outdated packages and review changelogs",
        "recommended_frequency_days": 14,
        "sort_order": 2,
    },
    {
        "name": "Code Review",
        "slug": "code-review",
        "description": "Review recent changes for quality and dead code",
        "recommended_frequency_days": 14,
        "sort_order": 3,
    },
    {
        "name": "Performance Audit",
        "slug": "performance-audit",
        "description": "Check bundle size, page speed and slow queries",
        "recommended_frequency_days": 30,
        "sort_order": 4,
    },
    {
        "name": "Accessibility Check",
        "slug": "accessibility-check",
        "description": "Run an accessibility audit on key pages",
        "recommended_frequency_days": 30,
        "sort_order": 5,
    },
]


def seed_table(supabase: Client, table: str, rows: List[Dict[str, Any]]) -> int:
    """Insert or update rows keyed on slug. Returns how many were processed."""
    logger.info(f"Seeding {table}...")
    created_count = 0
    updated_count = 0

    for row in rows:
        try:
            existing = supabase.table(table)\
                .select("id")\
                .eq("slug", row["slug"])\
                .execute()

            if existing.data:
                supabase.table(table)\
                    .update({k: v for k, v in row.items() if k != "slug"})\
                    .eq("slug", row["slug"])\
                    .execute()
                updated_count += 1
                logger.debug(f"Updated {table}: {row['slug']}")
            else:
                supabase.table(table).insert(row).execute()
                created_count += 1
                logger.debug(f"Created {table}: {row['slug']}")
        except Exception as e:
            logger.error(f"Error processing {table} {row['slug']}: {e}")

    logger.info(f"{table} seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def main():
    try:
        supabase = get_service_supabase()

        env_count = seed_table(supabase, "environments", ENVIRONMENTS)
        command_count = seed_table(supabase, "maintenance_command_types", MAINTENANCE_COMMAND_TYPES)

        logger.info(f"Total: {env_count} environments, {command_count} maintenance command types processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
