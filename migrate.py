#!/usr/bin/env python3
"""
Database management script.
Creates and drops tables and seeds an administrator plus sample listings.
"""

import asyncio
import argparse
import logging
from decimal import Decimal

from marketplace.config import settings
from marketplace.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection, utcnow
from marketplace.models.user import UserRole
from marketplace.models.property import PropertyStatus, PropertyCategory
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SAMPLE_LISTINGS = [
    {
        "title": "Modern 3-Bedroom Apartment in Bole",
        "description": "Bright apartment close to the airport with a balcony and secure parking.",
        "address": "Bole Road 12",
        "city": "Addis Ababa",
        "country": "Ethiopia",
        "price": Decimal("4500000"),
        "category": PropertyCategory.APARTMENT,
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 140.0,
        "amenities": ["parking", "balcony", "security"],
        "images": [{"url": "https://images.example.com/listings/bole-1.jpg", "caption": "Living room"}],
    },
    {
        "title": "Family Villa with Garden",
        "description": "Spacious villa on a quiet street with a large garden and servant quarters.",
        "address": "CMC Road 45",
        "city": "Addis Ababa",
        "country": "Ethiopia",
        "price": Decimal("18500000"),
        "category": PropertyCategory.VILLA,
        "bedrooms": 5,
        "bathrooms": 4,
        "area": 420.0,
        "amenities": ["garden", "parking"],
        "images": [{"url": "https://images.example.com/listings/cmc-1.jpg", "caption": "Front view"}],
    },
]


class DatabaseManager:
    """Manages schema creation and seed data."""

    async def create(self) -> None:
        await create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def seed(self, admin_email: str, admin_password: str, with_samples: bool = True) -> None:
        """Seed an administrator and, optionally, a sample owner with published listings."""
        logger.info("Seeding database with initial data")

        async with AsyncSessionLocal() as session:
            users = UserRepository(session)

            if await users.get_by_email(admin_email):
                logger.info("Admin user already exists, skipping seed")
                return

            await users.create_user({
                "name": "Administrator",
                "email": admin_email,
                "password": admin_password,
                "role": UserRole.ADMIN,
            })
            logger.info(f"Admin user created: {admin_email}")

            if not with_samples:
                return

            owner = await users.create_user({
                "name": "Sample Owner",
                "email": "owner@example.com",
                "password": "owner123456",
                "role": UserRole.OWNER,
            })

            properties = PropertyRepository(session)
            for listing in SAMPLE_LISTINGS:
                data = dict(listing)
                images = data.pop("images")
                data.update({
                    "owner_id": owner.id,
                    "status": PropertyStatus.PUBLISHED,
                    "is_active": True,
                    "published_at": utcnow(),
                })
                await properties.create_property(data, images)

            logger.info(f"Created sample owner owner@example.com with {len(SAMPLE_LISTINGS)} listings")

        if settings.is_production:
            logger.warning("Please change the seeded passwords!")

    async def reset(self, admin_email: str, admin_password: str) -> None:
        """Drop, recreate and seed. Refused in production."""
        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")

        await self.drop()
        await self.create()
        await self.seed(admin_email, admin_password)
        logger.info("Database reset completed")


def main():
    """CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Property Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (not in production)")

    for name, help_text in (("seed", "Seed an admin and sample data"), ("reset", "Drop, create and seed")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--admin-email", default="admin@example.com")
        sub.add_argument("--admin-password", default="admin123456")
        if name == "seed":
            sub.add_argument("--no-samples", action="store_true", help="Only create the admin")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    manager = DatabaseManager()

    async def run():
        try:
            if args.command == "create":
                await manager.create()
            elif args.command == "drop":
                await manager.drop()
            elif args.command == "seed":
                await manager.seed(args.admin_email, args.admin_password, with_samples=not args.no_samples)
            elif args.command == "reset":
                await manager.reset(args.admin_email, args.admin_password)
        finally:
            await close_db_connection()

    asyncio.run(run())


if __name__ == "__main__":
    main()
