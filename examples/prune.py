import asyncio
import os
import sys

import guildrest

# Reports how many members a prune would remove, then prunes if asked to.
# Usage: python prune.py [days] [--confirm]

async def main():
    guild_id = int(os.environ['GUILD_ID'])
    days = int(sys.argv[1]) if len(sys.argv) > 1 and sys.argv[1].isdigit() else 7

    async with guildrest.Client(os.environ['TOKEN']) as client:
        count = await client.prune_count(guild_id, days)
        print(f'{count} members have been inactive for {days} days')

        if '--confirm' in sys.argv:
            pruned = await client.prune_with_count(guild_id, days, reason='Routine cleanup')
            print(f'Pruned {pruned} members')

asyncio.run(main())
