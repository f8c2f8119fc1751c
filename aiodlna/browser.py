'''The public interface to aiodlna.

If it's in this module, you should assume the interface is reasonably stable.
You can call code in other modules, but it might break.

Also, nothing else in aiodlna is allowed to depend on this module. If you
are writing code that will be used elsewhere in aiodlna, this is the wrong
place.
'''

import logging
from typing import Optional

import aiohttp

from . import models, parsers, upnp

log = logging.getLogger(__name__)


async def browse(
        object_id: Optional[str],
        control_url: str,
        options: Optional[models.BrowseOptions] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None) -> models.BrowseResult:
    '''Browse one object of a media server's ContentDirectory.

    Send a single Browse action for ``object_id`` to ``control_url`` (the
    ContentDirectory control URL from the server's device description)
    and return the listing: sub-containers, plus the items that have at
    least one playable stream. Items with no playable stream are left
    out.

    If ``session`` is None, a session is created for this call and closed
    before returning. Pass your own to reuse connections.

    Raises:
        `ValidationError`: bad object_id, control_url or options.
        `TransportError`: the HTTP exchange failed or timed out.
        `ParseError`: the response (or its DIDL-Lite) is not XML.
        `ProtocolError`: the response is not a Browse response
            (`UPnPFaultError` if it is a SOAP fault).
    '''
    if session is None:
        # check arguments before creating a session that we don't need
        upnp.browse_arguments(object_id, options or models.BrowseOptions())
        upnp.validate_control_url(control_url)
        async with aiohttp.ClientSession() as session:
            return await browse(
                object_id, control_url, options, session=session, timeout=timeout)

    client = upnp.UPnPClient(session, timeout)
    body = await client.browse(control_url, object_id, options)
    result = parsers.parse_browse_response(body, control_url)
    log.info('Browsed %r at %s: %s', object_id, control_url, result)
    return result


async def browse_metadata(
        object_id: Optional[str],
        control_url: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None) -> models.BrowseResult:
    '''Fetch the metadata of object_id itself, rather than its children.

    The result holds (at most) one container or one item.
    '''
    options = models.BrowseOptions(browse_flag=models.BrowseFlag.METADATA)
    return await browse(
        object_id, control_url, options, session=session, timeout=timeout)
