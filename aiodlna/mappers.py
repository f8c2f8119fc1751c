'''map DIDL-Lite ``<container>`` and ``<item>`` elements to model objects

Every field except an item's stream is optional: servers fill in what
they feel like. A missing field becomes an empty string (or None), never
an exception.

A typical item looks like this:

    <item id="64$1$0" parentID="64$1" restricted="1">
      <dc:title>Release</dc:title>
      <upnp:artist>Afro Celt Sound System</upnp:artist>
      <upnp:album>Volume 2: Release</upnp:album>
      <upnp:class>object.item.audioItem.musicTrack</upnp:class>
      <upnp:albumArtURI>http://10.0.0.5:8200/AlbumArt/21-64.jpg</upnp:albumArtURI>
      <res duration="0:07:36.000" sampleFrequency="44100"
           bitsPerSample="16" nrAudioChannels="2"
           protocolInfo="http-get:*:audio/x-flac:*">http://10.0.0.5:8200/MediaItems/64.flac</res>
    </item>
'''

import logging
from typing import List, Optional, Type
from xml.etree import ElementTree

from didl_lite import didl_lite as didl
from didl_lite.utils import NAMESPACES, expand_namespace_tag

from . import errors, models, streams, utils

log = logging.getLogger(__name__)


def from_element(element: ElementTree.Element) -> didl.DidlObject:
    '''Build a didl_lite object from an ``<item>`` or ``<container>``
    element.

    Unlike ``didl.from_xml_el()``, this never skips an element because
    its ``upnp:class`` is missing or unknown: it falls back to a plain
    `didl.Item` or `didl.Container`.
    '''
    base: Type[didl.DidlObject]
    if element.tag == expand_namespace_tag('didl_lite:container'):
        base = didl.Container
    else:
        base = didl.Item
    upnp_class = element.findtext('upnp:class', '', NAMESPACES).strip()
    cls = didl.type_by_upnp_class(upnp_class, strict=False) if upnp_class else None
    if cls is None or not issubclass(cls, base):
        cls = base
    return cls.from_xml(element, strict=False)


def _text(obj: didl.DidlObject, tag: str) -> str:
    '''Return the text of the first ``tag`` (eg. ``"dc:title"``) property
    of obj, or an empty string.'''
    # didl_lite keeps the last of a repeated property, but we want the first
    assert obj.xml_el is not None
    return (obj.xml_el.findtext(tag, '', NAMESPACES) or '').strip()


def map_container(element: ElementTree.Element) -> models.Container:
    '''Return a Container built from a ``<container>`` element.

    Never fails: if something goes wrong halfway, the fields read so far
    are returned and the rest are left empty.
    '''
    container = models.Container()
    try:
        obj = from_element(element)
        container.title = _text(obj, 'dc:title')
        container.artist = _text(obj, 'upnp:artist') or None
        container.upnp_class = _text(obj, 'upnp:class')
        container.id = obj.id or ''
        container.parent_id = obj.parent_id or ''
        container.child_count = obj.child_count or ''
    except Exception:
        log.warning('error mapping container %r', container.id or element.attrib,
                    exc_info=True)
    return container


def _format_attr(res: didl.Resource, name: str, value: Optional[str]) -> Optional[int]:
    '''Convert an audio format attribute of res to an int, truncating
    any fraction. Returns None if the attribute is missing or empty.

    Raises ValueError if the attribute is present but not a number.
    '''
    if value is None or not value.strip():
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        raise ValueError('{} has bad {}: {!r}'.format(res.uri, name, value))


def parse_resource(res: didl.Resource) -> models.Resource:
    '''Convert a didl_lite resource to our Resource.

    A resource whose sample frequency, bit depth or channel count can't
    be understood is flagged with ``bad_format``, which makes it
    unplayable.
    '''
    uri = (res.uri or '').strip()
    try:
        return models.Resource(
            uri=uri,
            sample_frequency=_format_attr(res, 'sampleFrequency', res.sample_frequency),
            bits_per_sample=_format_attr(res, 'bitsPerSample', res.bits_per_sample),
            nr_audio_channels=_format_attr(res, 'nrAudioChannels', res.nr_audio_channels),
            duration=res.duration,
            protocol_info=res.protocol_info,
        )
    except ValueError as err:
        log.debug('unplayable resource: %s', err)
        return models.Resource(
            uri=uri,
            duration=res.duration,
            protocol_info=res.protocol_info,
            bad_format=True,
        )


def map_item(element: ElementTree.Element) -> models.MapResult[models.Item]:
    '''Try to build an Item from an ``<item>`` element.

    The outcome is a failure if none of the item's resources is playable
    (`NoPlayableStreamError`) or if anything else about the element is
    unusable. Callers are expected to skip failed items.
    '''
    try:
        return models.MapResult.success(_map_item(from_element(element)))
    except Exception as err:
        if not isinstance(err, errors.NoPlayableStreamError):
            log.debug('error mapping item %r', element.attrib, exc_info=True)
        return models.MapResult.failure(err)


def _map_item(obj: didl.DidlObject) -> models.Item:
    title = _text(obj, 'dc:title')
    # dc:creator is the DIDL-Lite base property; many servers only
    # provide upnp:artist for music, some only dc:creator
    artist = _text(obj, 'upnp:artist') or _text(obj, 'dc:creator')

    candidates: List[models.Resource] = [
        parse_resource(res) for res in obj.res if res.uri and res.uri.strip()]
    best_idx = streams.select_best(candidates)
    if best_idx == streams.NO_STREAM:
        raise errors.NoPlayableStreamError(title, len(candidates))
    resource = candidates[best_idx]
    log.debug('chose stream %d of %d for %r: %s (%s)',
              best_idx, len(candidates), title, resource.uri,
              resource.describe_format())

    duration = None
    if resource.duration:
        try:
            duration = utils.parse_duration(resource.duration)
        except ValueError:
            log.debug('ignoring bad duration %r for %r', resource.duration, title)

    return models.Item(
        source_url=resource.uri,
        upnp_class=_text(obj, 'upnp:class'),
        id=obj.id or '',
        title=title,
        artist=artist,
        album=_text(obj, 'upnp:album'),
        parent_id=obj.parent_id or '',
        duration=duration,
        image_url=_text(obj, 'upnp:albumArtURI'),
        resource=resource,
    )
