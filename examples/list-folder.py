'''list one folder of a DLNA media server, with the stream chosen for each track

usage: list-folder.py CONTROL_URL [OBJECT_ID]
'''

import asyncio
import logging
import sys

from aiodlna import browser


async def main(control_url: str, object_id: str) -> None:
    logging.basicConfig(
        format='[%(asctime)s %(levelname)-1.1s %(name)s] %(message)s',
        level=logging.DEBUG,
        stream=sys.stdout)
    result = await browser.browse(object_id, control_url)
    if not result.containers and not result.items:
        print('{}: empty folder'.format(object_id))
        return

    for container in result.containers or []:
        print('{}/ ({} children)'.format(container.title, container.child_count or '?'))
    for item in result.items or []:
        print('  {}: {} - {} ({})'.format(
            item.id,
            item.artist,
            item.title,
            item.album))
        if item.resource is not None:
            print('    {} {}'.format(item.resource.describe_format(), item.source_url))


if __name__ == '__main__':
    if len(sys.argv) not in (2, 3):
        sys.exit(__doc__.strip().splitlines()[-1])
    asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) == 3 else '0'))
