'''command-line interface to DLNA media servers using aiodlna'''

import asyncio
import logging
import sys
from typing import Optional

import aiohttp
import click

from . import browser, errors, models


_debug: int = 0


@click.group()
@click.option('--debug', default=0, help='Print more detailed information')
def main(debug):
    global _debug
    _debug = debug

    logging.basicConfig(
        format='[%(asctime)s %(levelname)-1.1s %(name)s] %(message)s',
        level=logging.WARNING,
        stream=sys.stderr)
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
        3: logging.DEBUG - 1,      # log request/response bodies too
    }
    level = level_map.get(debug, logging.DEBUG - 1)
    logging.getLogger('aiodlna').setLevel(level)


@main.command()
@click.argument('control_url')
@click.argument('object_id', default='0')
@click.option('--start', '-s', default=0, help='Index of the first child to return')
@click.option('--count', '-n', default=1000, help='Maximum number of children to return')
@click.option('--sort', default='', help='Sort criteria, eg "+dc:title"')
@click.option('--filter', 'filter_', default='*', help='Properties to return')
@click.option('--metadata', '-m', is_flag=True,
              help='Show the object itself rather than its children')
def browse(control_url, object_id, start, count, sort, filter_, metadata):
    flag = models.BrowseFlag.METADATA if metadata else models.BrowseFlag.DIRECT_CHILDREN
    options = models.BrowseOptions(
        browse_flag=flag,
        filter=filter_,
        start_index=start,
        request_count=count,
        sort=sort,
    )
    _run(_browse(control_url, object_id, options))


@main.command()
@click.argument('control_url')
@click.argument('object_id', default='0')
@click.option('--depth', '-d', default=2, help='How many levels of containers to descend')
def walk(control_url, object_id, depth):
    _run(_walk(control_url, object_id, depth))


def _run(coro):
    try:
        asyncio.run(coro)
    except errors.DLNAError as err:
        sys.exit(f'dlnatool: error: {err}')


def format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return '?:??'
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f'{hours}:{minutes:02d}:{seconds:02d}'
    return f'{minutes}:{seconds:02d}'


def _show_result(result: models.BrowseResult, indent: str = ''):
    for container in result.containers or []:
        children = f' ({container.child_count})' if container.child_count else ''
        print(f'{indent}[C] {container.id} {container.title!r}{children}')
    for item in result.items or []:
        print(f'{indent}[I] {item.id} {item.artist!r} - {item.title!r} '
              f'({format_duration(item.duration)}) {item.source_url}')
        if _debug and item.resource is not None:
            print(f'{indent}    {item.resource.describe_format()}')


async def _browse(control_url: str, object_id: str, options: models.BrowseOptions):
    result = await browser.browse(object_id, control_url, options)
    _show_result(result)
    print(f'{result.number_returned} returned, {result.total_matches} total matches, '
          f'update ID {result.update_id}')


async def _walk(control_url: str, object_id: str, depth: int):
    async with aiohttp.ClientSession() as session:
        await _walk_one(session, control_url, object_id, depth, '')


async def _walk_one(
        session: aiohttp.ClientSession,
        control_url: str,
        object_id: str,
        depth: int,
        indent: str):
    result = await browser.browse(object_id, control_url, session=session)
    for container in result.containers or []:
        print(f'{indent}[C] {container.id} {container.title!r}')
        if depth > 1:
            await _walk_one(session, control_url, container.id, depth - 1, indent + '  ')
    _show_result(models.BrowseResult(items=result.items), indent)


if __name__ == '__main__':
    main()
