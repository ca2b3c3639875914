import asyncio
import os

import guildrest

# Walks every member of a guild and bans anyone whose nickname contains a
# word from the list below. Run it with GUILD_ID and TOKEN set.

BAD_WORDS = ('really bad word',)

async def main():
    guild_id = int(os.environ['GUILD_ID'])

    async with guildrest.Client(os.environ['TOKEN']) as client:
        async for member in client.fetch_members(guild_id):
            nick = (member.nick or '').lower()
            if any(word in nick for word in BAD_WORDS):
                # This assumes the bot has permission to ban, which it may not.
                await member.ban(delete_message_days=1, reason='Offensive nickname')
                print(f'Banned {member} ({member.id})')

        bans = await client.bans(guild_id)
        print(f'{len(bans)} users are now banned')

asyncio.run(main())
