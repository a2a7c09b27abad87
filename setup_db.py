# ResultSheet - Student results manager
# Copyright (C) 2026 (linuxdev)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


import os
import json
import logging
from sqlalchemy.orm import sessionmaker
from config import CONFIG_FILE, Settings
from database import Base, make_engine
from crud_ops import create_admin, get_admin_by_email
import models  # noqa: F401

logger = logging.getLogger("setup_db")


def setup_database(settings):
    """Create the tables and the super admin from configuration"""
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        if not get_admin_by_email(db, settings.admin_email):
            create_admin(db, settings.admin_email, settings.admin_password, is_super_admin=True)
            logger.info("Admin %s created successfully.", settings.admin_email)
        else:
            logger.info("Admin %s already exists.", settings.admin_email)
    finally:
        db.close()
        engine.dispose()


def create_config_file(path=CONFIG_FILE):
    """Create config.json with default settings"""
    defaults = Settings()
    config_data = {
        "database_url": defaults.database_url,
        "secret_key": os.urandom(24).hex(),
        "admin_email": defaults.admin_email,
        "admin_password": defaults.admin_password,
        "log_level": "INFO",
        "lock_unpaid_results": False,
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_data, f, ensure_ascii=False, indent=4)

    logger.info("Config file %s created.", path)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    logger.info("Starting setup process...")

    if not os.path.exists(CONFIG_FILE):
        create_config_file()

    # Reload so the values just written are picked up
    setup_database(Settings())

    logger.info("Setup completed successfully!")


if __name__ == "__main__":
    main()
