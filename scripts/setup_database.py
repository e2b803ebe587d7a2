#!/usr/bin/env python3
"""
Nerdiversary Database Setup Script
==================================

Creates the subscriber store tables (subscriptions, family_members,
notification_log). Run this before starting the API server or the worker.

Usage:
    python scripts/setup_database.py [--check-only]
"""

import sys
import logging
import argparse
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from nerdiversary.db.session import engine
from nerdiversary.db.base import Base

# Register the push service tables with Base.metadata
from nerdiversary.notifications import models  # noqa: F401

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def test_connection():
    """Test database connection"""
    logger.info("🔌 Testing database connection...")
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection successful")
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False


def check_tables_exist():
    """Check if all required tables exist"""
    try:
        existing_tables = inspect(engine).get_table_names()
        required_tables = [table.name for table in Base.metadata.tables.values()]
        missing_tables = [table for table in required_tables if table not in existing_tables]

        logger.info(f"📋 Found {len(existing_tables)} existing tables, {len(required_tables)} required")

        if missing_tables:
            logger.warning(f"⚠️ Missing tables: {missing_tables}")
            return False
        logger.info("✅ All required tables exist")
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to check tables: {e}")
        return False


def create_tables():
    """Create all required tables"""
    try:
        logger.info("🏗️ Creating database tables...")
        Base.metadata.create_all(bind=engine)
        created_tables = inspect(engine).get_table_names()
        logger.info(f"✅ Tables present: {', '.join(created_tables)}")
        return True
    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to create tables: {e}")
        return False


def main():
    """Main setup function"""
    parser = argparse.ArgumentParser(description='Nerdiversary Database Setup')
    parser.add_argument('--check-only', action='store_true',
                        help='Only check if tables exist, do not create')
    args = parser.parse_args()

    logger.info("🚀 Nerdiversary Database Setup")
    logger.info("=" * 40)

    if not test_connection():
        logger.error("❌ Cannot proceed without database connection")
        sys.exit(1)

    tables_exist = check_tables_exist()

    if args.check_only:
        sys.exit(0 if tables_exist else 1)

    if not tables_exist and not create_tables():
        logger.error("❌ Failed to create tables")
        sys.exit(1)

    if check_tables_exist():
        logger.info("🎉 Database setup completed successfully!")
        logger.info("Start the API with:    uvicorn nerdiversary.main:app --host 0.0.0.0 --port 8000")
        logger.info("Start the worker with: celery -A nerdiversary.notifications.celery_app worker -B")
    else:
        logger.error("❌ Setup verification failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
