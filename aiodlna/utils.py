import html
import logging
import re
from typing import Any, Union


def prettify(xml_text: str) -> str:
    '''Return a pretty-printed version of a unicode XML string.

    Useful for debugging.

    Args:
        xml_text (str): A text representation of XML (unicode,
            *not* utf-8).

    Returns:
        str: A pretty-printed version of the input.

    '''
    import xml.dom.minidom
    import xml.parsers.expat

    try:
        reparsed = xml.dom.minidom.parseString(xml_text)
    except xml.parsers.expat.ExpatError:
        return xml_text            # I guess it's not really XML text after all
    return reparsed.toprettyxml(indent='  ', newl='\n')


def log_network(log: logging.Logger, fmt: str, *args: Any, data: Union[None, bytes, str]):
    if log.isEnabledFor(logging.DEBUG - 1) and data:  # log the data too
        fmt += ':\n%s'
        if isinstance(data, bytes):
            data = data.decode('utf-8', errors='replace')
        args = args + (data,)
    log.debug(fmt, *args)


# the only named entities an XML parser understands
_XML_ENTITIES = {'amp', 'lt', 'gt', 'quot', 'apos'}
_XML_ESCAPES = {'&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&apos;'}
_named_entity_re = re.compile(r'&([A-Za-z][A-Za-z0-9]*);')


def decode_entities(text: str) -> str:
    '''Replace HTML named entities (``&eacute;``, ``&nbsp;``, ...) in text
    with the characters they stand for.

    Some media servers leak HTML entities into their XML, which makes
    any XML parser choke. XML's own entities are left alone, and HTML
    names for the same characters (``&LT;``, ``&AMP;``, ...) become
    XML entities, so the result is still XML if the input was.

        >>> decode_entities('<a>caf&eacute; &amp; bar</a>')
        '<a>café &amp; bar</a>'
    '''
    def replace(match):
        if match.group(1) in _XML_ENTITIES:
            return match.group(0)
        char = html.unescape(match.group(0))
        return _XML_ESCAPES.get(char, char)

    return _named_entity_re.sub(replace, text)


def strip_namespace(tag: str) -> str:
    '''Return tag without its ``{namespace}`` prefix, if any.'''
    if tag.startswith('{'):
        tag = tag.split('}', 1)[1]
    return tag


def parse_duration(duration: str) -> int:
    '''Convert a UPnP duration (``H+:MM:SS[.F+]`` or ``H+:MM:SS[.F0/F1]``)
    to whole seconds, rounding down.

    Raises ValueError if duration is not in that format.
    '''
    bits = duration.strip().split(':')
    if len(bits) != 3:
        raise ValueError('invalid duration: {!r}'.format(duration))
    hours, minutes, seconds = bits
    # the fraction is always < 1 second, so dropping it is the same as
    # rounding down the total
    seconds = seconds.split('.', 1)[0]
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds)
