'''parse Browse responses and turn them into useful model objects

Parsing happens in two passes, because that's how the Browse action
works: the SOAP envelope carries a ``<Result>`` element whose text is an
XML-escaped DIDL-Lite document. `parse_envelope()` handles the first
pass, `parse_didl()` the second, and `extract_listing()` turns the
DIDL-Lite tree into containers and items.

Media servers disagree about namespace prefixes, about which elements
repeat, and about which elements are present at all. So the envelope is
parsed into a tree of `XMLNode`, with namespaces stripped and every
child tag mapped to a list. The DIDL-Lite document is handed to
didl_lite, which matches elements by namespace URI rather than prefix.
'''

import logging
from typing import Optional, Union
from xml.etree import ElementTree

from didl_lite.utils import expand_namespace_tag

from . import errors, mappers, models, upnp
from .xmltree import XMLNode, parse_element, parse_xml

log = logging.getLogger(__name__)

DIDL_LITE = expand_namespace_tag('didl_lite:DIDL-Lite')
DIDL_CONTAINER = expand_namespace_tag('didl_lite:container')
DIDL_ITEM = expand_namespace_tag('didl_lite:item')


def parse_envelope(body: Union[bytes, str]) -> XMLNode:
    '''First pass: parse the raw body of a SOAP response.'''
    return parse_xml(body)


def get_browse_result(tree: XMLNode, control_url: str = '', raw: str = '') -> XMLNode:
    '''Return the ``<Result>`` node of a parsed Browse response.

    A Browse response looks like this:

        <s:Envelope
          xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"
          s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
          <s:Body>
            <u:BrowseResponse
                xmlns:u="urn:schemas-upnp-org:service:ContentDirectory:1">
              <Result>&lt;DIDL-Lite ...&gt;...&lt;/DIDL-Lite&gt;</Result>
              <NumberReturned>3</NumberReturned>
              <TotalMatches>3</TotalMatches>
              <UpdateID>17</UpdateID>
            </u:BrowseResponse>
          </s:Body>
        </s:Envelope>

    Raises:
        `UPnPFaultError`: if the body is a SOAP fault.
        `ProtocolError`: if any other element on the path is missing.
    '''
    body = tree.path('Envelope', 'Body')
    if body is None:
        raise errors.ProtocolError(
            'did not get expected response from server: {}'.format(tree.to_dict()), tree)
    fault = body.first('Fault')
    if fault is not None:
        raise_upnp_error(fault, tree, control_url, raw)
    result = body.path('BrowseResponse', 'Result')
    if result is None:
        raise errors.ProtocolError(
            'did not get expected response from server: {}'.format(tree.to_dict()), tree)
    return result


def raise_upnp_error(fault: XMLNode, tree: XMLNode, control_url: str, raw: str):
    """Dissect a SOAP fault and raise an appropriate exception."""

    # A fault looks something like this:

    #   <s:Body>
    #       <s:Fault>
    #           <faultcode>s:Client</faultcode>
    #           <faultstring>UPnPError</faultstring>
    #           <detail>
    #               <UPnPError xmlns="urn:schemas-upnp-org:control-1-0">
    #                   <errorCode>error code</errorCode>
    #                   <errorDescription>error string</errorDescription>
    #               </UPnPError>
    #           </detail>
    #       </s:Fault>
    #   </s:Body>

    service = upnp.SERVICE_CONTENT_DIRECTORY
    upnp_error = fault.path('detail', 'UPnPError')
    error_code = None
    if upnp_error is not None:
        error_code = upnp_error.findtext('errorCode', None)
    if upnp_error is not None and error_code is not None:
        description = upnp_error.findtext('errorDescription')
        if not description:
            try:
                description = service.upnp_errors.get(int(error_code), '')
            except ValueError:
                description = ''
        raise errors.UPnPFaultError(
            url=control_url,
            error_code=error_code,
            error_description=description,
            error_xml=raw,
            tree=tree,
        )

    log.error('Unknown SOAP fault received from %s', control_url)
    raise errors.ProtocolError(
        'SOAP fault from {}: {}'.format(
            control_url, fault.findtext('faultstring', 'no faultstring')),
        tree)


def parse_didl(result: XMLNode) -> Optional[ElementTree.Element]:
    '''Second pass: parse the DIDL-Lite document held in a ``<Result>``
    and return its root element, or None if the result is empty.

    Normally the DIDL-Lite is text (escaped by the server, unescaped by
    the first pass). A few servers embed it as real child elements
    instead, in which case it's already parsed and we use it as is.
    '''
    embedded = result.first('DIDL-Lite')
    if embedded is not None:
        return embedded.element
    if not result.text:
        return None
    return parse_element(result.text)


def extract_listing(didl: Optional[ElementTree.Element]) -> models.BrowseResult:
    '''Split a parsed DIDL-Lite document into containers and items.

    Only ``<container>`` and ``<item>`` elements in the DIDL-Lite
    namespace count, whatever prefix the server gave them. Items that
    can't be mapped (most commonly because none of their streams is
    playable) are dropped, never fatal.

    Raises:
        `ProtocolError`: if the document is not DIDL-Lite.
    '''
    if didl is None or didl.tag != DIDL_LITE:
        tree = XMLNode()
        if didl is not None:
            tree.append(XMLNode.from_element(didl))
        raise errors.ProtocolError(
            'did not get expected DIDL-Lite result from server: {}'.format(tree.to_dict()),
            tree)

    listing = models.BrowseResult()
    for element in didl:
        if element.tag == DIDL_CONTAINER:
            if listing.containers is None:
                listing.containers = []
            listing.containers.append(mappers.map_container(element))
        elif element.tag == DIDL_ITEM:
            if listing.items is None:
                listing.items = []
            outcome = mappers.map_item(element)
            if outcome.ok:
                assert outcome.record is not None
                listing.items.append(outcome.record)
            else:
                log.debug('dropping item %r: %s', element.get('id'), outcome.error)
    return listing


def _int_or_none(text: str) -> Optional[int]:
    try:
        return int(text)
    except ValueError:
        return None


def parse_browse_response(body: Union[bytes, str], control_url: str = '') -> models.BrowseResult:
    '''Parse the raw body of a Browse response into a `BrowseResult`.'''
    tree = parse_envelope(body)
    raw = body.decode('utf-8', errors='replace') if isinstance(body, bytes) else body
    result = get_browse_result(tree, control_url, raw)
    listing = extract_listing(parse_didl(result))

    response = tree.path('Envelope', 'Body', 'BrowseResponse')
    assert response is not None
    listing.number_returned = _int_or_none(response.findtext('NumberReturned'))
    listing.total_matches = _int_or_none(response.findtext('TotalMatches'))
    listing.update_id = response.findtext('UpdateID', None)
    return listing
