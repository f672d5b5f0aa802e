#!/usr/bin/env python3
"""
Create an admin account.

A fresh database has no admins and the dashboard cannot create the first one
without a session, so bootstrap it here:

    python scripts/create_admin.py --username owner --email owner@jagdambacaterers.in
"""

import argparse
import asyncio
import getpass
import sys

from dotenv import load_dotenv
from loguru import logger

from caterdesk.api.dependencies import ServiceContainer, Settings
from caterdesk.auth import hash_password
from caterdesk.errors import CaterDeskException
from caterdesk.storage.schemas import ADMIN_TABLE, AdminForm, parse_form


async def create_admin(settings: Settings, username: str, email: str, password: str) -> str:
    form = parse_form(AdminForm, {"username": username, "email": email, "password": password})

    services = ServiceContainer(settings)
    try:
        await services.startup()
        gateway = services.gateway

        existing = await gateway.select(ADMIN_TABLE.table, filters={"email": form.email})
        if existing:
            raise SystemExit(f"An admin with email {form.email} already exists")

        row = await gateway.insert(
            ADMIN_TABLE.table,
            {
                "username": form.username,
                "email": form.email,
                "password_hash": hash_password(form.password),
            },
        )
    finally:
        await services.shutdown()

    return str(row["id"])


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Create a CaterDesk admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        parser.error("password must not be empty")

    try:
        admin_id = asyncio.run(
            create_admin(Settings.from_env(), args.username, args.email, password)
        )
    except CaterDeskException as e:
        logger.error(f"{e.message}: {e.detail or ''}")
        sys.exit(1)

    logger.info(f"Created admin {args.email} ({admin_id})")


if __name__ == "__main__":
    main()
