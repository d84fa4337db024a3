#!/usr/bin/env python3
"""
Super User Script
Promote an existing user to super user

Usage:
    python -m script.create_super_user <user_id>

Notes:
- The user must have logged in through Feide at least once
- Super users pass every permission check, grant them sparingly
"""

import argparse
import asyncio
from uuid import UUID

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine


async def make_super(user_id: UUID) -> None:
    user = await container.user_query_repo().get_by_id(user_id=user_id)
    if user is None:
        raise SystemExit(f'❌ User {user_id} not found')
    if user.is_super_user:
        print(f'ℹ️  {user.username} is already a super user')
        return

    user.is_super_user = True
    updated = await container.user_command_repo().update(user=user)
    print(f'✅ Promoted {updated.username} ({updated.id}) to super user')


async def main() -> None:
    parser = argparse.ArgumentParser(description='Promote a user to super user')
    parser.add_argument('user_id', type=UUID, help='id of the user to promote')
    args = parser.parse_args()

    print('🔄 Promoting user to super user...')
    try:
        await make_super(args.user_id)
    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
