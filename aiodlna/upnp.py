import asyncio
import logging
from urllib import parse as urlparse
from xml.sax import saxutils
from typing import Optional, Any, Dict, List, Tuple

import aiohttp

from . import errors, models, utils

log = logging.getLogger(__name__)

# type aliases
SOAPArgs = Optional[List[Tuple[str, Any]]]

#: Some DLNA servers refuse to talk to clients they don't recognize, so
#: pretend to be a common Android control point.
USER_AGENT = 'Android UPnP/1.0 DLNADOC/1.50'

#: seconds allowed for one complete request/response exchange
DEFAULT_TIMEOUT = 30.0


class UPnPService:
    service_type: str
    version: int

    def __init__(self):
        self.service_type = self.__class__.__name__
        self.version = 1

        # From table 3.3 in
        # http://upnp.org/specs/arch/UPnP-arch-DeviceArchitecture-v1.1.pdf
        # Error codes between 700-799 are defined for particular
        # services, and may be added by subclasses.

        # pylint: disable=invalid-name
        self.upnp_errors = {
            400: "Bad Request",
            401: "Invalid Action",
            402: "Invalid Args",
            404: "Invalid Var",
            412: "Precondition Failed",
            501: "Action Failed",
            600: "Argument Value Invalid",
            601: "Argument Value Out of Range",
            602: "Optional Action Not Implemented",
            603: "Out Of Memory",
            604: "Human Intervention Required",
            605: "String Argument Too Long",
            606: "Action Not Authorized",
            607: "Signature Failure",
            608: "Signature Missing",
            609: "Not Encrypted",
            610: "Invalid Sequence",
            611: "Invalid Control URL",
            612: "No Such Session",
        }

    @property
    def namespace(self) -> str:
        return 'urn:schemas-upnp-org:service:{}:{}'.format(
            self.service_type, self.version)

    def soap_action(self, action: str) -> str:
        return '"{}#{}"'.format(self.namespace, action)


class ContentDirectory(UPnPService):
    """The UPnP ContentDirectory service: the browsable tree of containers
    and items offered by a media server."""

    def __init__(self):
        super().__init__()
        # From section 2.5.4 of
        # http://upnp.org/specs/av/UPnP-av-ContentDirectory-v1-Service.pdf
        self.upnp_errors.update({
            701: "No such object",
            702: "Invalid CurrentTagValue",
            703: "Invalid NewTagValue",
            704: "Required tag",
            705: "Read only tag",
            706: "Parameter Mismatch",
            708: "Unsupported or invalid search criteria",
            709: "Unsupported or invalid sort criteria",
            710: "No such container",
            711: "Restricted object",
            712: "Bad metadata",
            713: "Restricted parent object",
            714: "No such source resource",
            715: "Source resource access denied",
            716: "Transfer busy",
            717: "No such file transfer",
            718: "No such destination resource",
            719: "Destination resource access denied",
            720: "Cannot process the request",
        })


SERVICE_CONTENT_DIRECTORY = ContentDirectory()

SOAP_BODY_TEMPLATE = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"'
    ' s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
    '<s:Body>'
    '<u:{action} xmlns:u="{namespace}">'
    '{arguments}'
    '</u:{action}>'
    '</s:Body>'
    '</s:Envelope>'
)  # noqa PEP8


def wrap_arguments(args: SOAPArgs = None) -> str:
    """Wrap a list of tuples in xml ready to pass into a SOAP request.

    Args:
        args (list):  a list of (name, value) tuples specifying the
            name of each argument and its value, eg
            ``[('ObjectID', '0'), ('StartingIndex', 0)]``. The value
            can be a string or something with a string representation. The
            arguments are escaped and wrapped in <name> and <value> tags.

    Example:

        >>> wrap_arguments([('ObjectID', 'a&b'), ('StartingIndex', 0)])
        '<ObjectID>a&amp;b</ObjectID><StartingIndex>0</StartingIndex>'
    """
    if args is None:
        args = []

    tags = []
    for name, value in args:
        tag = "<{name}>{value}</{name}>".format(
            name=name,
            value=saxutils.escape(str(value), {'"': "&quot;"})
        )
        tags.append(tag)

    xml = "".join(tags)
    return xml


def build_command(
        service: UPnPService,
        action: str,
        args: SOAPArgs = None) -> Tuple[Dict[str, str], bytes]:
    '''Build a SOAP request.

    Args:
        action (str): the name of an action (a string as specified in the
            service description XML file) to be sent.
        args (list, optional): Relevant arguments as a list of (name,
            value) tuples, in the order the action declares them.

    Returns:
        tuple: the POST headers (as a dict) and the utf-8 encoded SOAP
            body. The host header is completed upon sending.
    '''

    # A complete request should look something like this:

    # POST path of control URL HTTP/1.1
    # HOST: host of control URL:port of control URL
    # CONTENT-LENGTH: bytes in body
    # CONTENT-TYPE: text/xml
    # SOAPACTION: "urn:schemas-upnp-org:service:serviceType:v#actionName"
    # USER-AGENT: Android UPnP/1.0 DLNADOC/1.50
    #
    # <?xml version="1.0" encoding="utf-8"?>
    # <s:Envelope
    #   xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"
    #   s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
    #   <s:Body>
    #       <u:actionName
    #           xmlns:u="urn:schemas-upnp-org:service:serviceType:v">
    #           <argumentName>in arg value</argumentName>
    #           ... other in args and their values go here, if any
    #       </u:actionName>
    #   </s:Body>
    # </s:Envelope>
    #
    # All on one line: some servers are fussy about whitespace.

    body = SOAP_BODY_TEMPLATE.format(
        arguments=wrap_arguments(args),
        action=action,
        namespace=service.namespace,
    ).encode('utf-8')
    headers = {
        'SOAPACTION': service.soap_action(action),
        'Content-Type': 'text/xml',
        'Content-Length': str(len(body)),
        'User-Agent': USER_AGENT,
    }
    return (headers, body)


def browse_arguments(object_id: Optional[str], options: models.BrowseOptions) -> List[Tuple[str, Any]]:
    if object_id is None:
        raise errors.ValidationError('object ID is required')
    options = options.with_defaults()
    return [
        ('ObjectID', object_id),
        ('BrowseFlag', options.browse_flag),
        ('Filter', options.filter),
        ('StartingIndex', options.start_index),
        ('RequestedCount', options.request_count),
        ('SortCriteria', options.sort),
    ]


def build_browse_request(
        object_id: Optional[str],
        options: Optional[models.BrowseOptions] = None) -> bytes:
    '''Return the SOAP body of a ContentDirectory Browse action.

    Raises ValidationError if object_id is None: there is no sensible
    default, and "0" (the root) is a real object that we do not want to
    browse by accident.
    '''
    args = browse_arguments(object_id, options or models.BrowseOptions())
    _, body = build_command(SERVICE_CONTENT_DIRECTORY, 'Browse', args)
    return body


def validate_control_url(control_url: Optional[str]) -> str:
    if not control_url:
        raise errors.ValidationError('control URL is required')
    try:
        parts = urlparse.urlsplit(control_url)
        parts.port                  # raises ValueError for a bogus port
    except ValueError as err:
        raise errors.ValidationError(
            'invalid control URL {!r}: {}'.format(control_url, err)) from err
    if parts.scheme not in ('http', 'https') or not parts.hostname:
        raise errors.ValidationError(
            'invalid control URL {!r}: expected http://host[:port]/path'
            .format(control_url))
    return control_url


class UPnPClient:
    '''An object for sending UPnP requests to media servers.'''

    def __init__(
            self,
            session: aiohttp.ClientSession,
            timeout: Optional[float] = None):
        self.session = session
        self.timeout = aiohttp.ClientTimeout(
            total=DEFAULT_TIMEOUT if timeout is None else timeout)

    async def send(
            self,
            control_url: str,
            headers: Dict[str, str],
            body: bytes) -> bytes:
        '''POST body to control_url and return the response body.

        The HTTP status is logged but otherwise ignored: a SOAP fault may
        arrive with any status, so the caller must inspect the payload.

        Raises:
            `ValidationError`: if control_url is not an http(s) URL.
            `TransportError`: if the request could not be completed.
        '''
        validate_control_url(control_url)
        utils.log_network(log, 'Sending %s to %s', headers, control_url, data=body)
        try:
            async with self.session.post(
                    control_url,
                    headers=headers,
                    data=body,
                    timeout=self.timeout) as response:
                response_body = await response.read()
                status = response.status
        except asyncio.TimeoutError as err:
            raise errors.TransportError(
                'timed out talking to {}'.format(control_url)) from err
        except (aiohttp.ClientError, OSError) as err:
            raise errors.TransportError(
                'error talking to {}: {}'.format(control_url, err)) from err

        if not 200 <= status < 300:
            log.info('Received status %s from %s', status, control_url)
        utils.log_network(
            log, 'Received status %s, %d bytes', status, len(response_body),
            data=response_body)
        return response_body

    async def send_command(
            self,
            control_url: str,
            service: UPnPService,
            action: str,
            args: SOAPArgs = None) -> bytes:
        '''Send an action to the service at control_url and return the raw
        response body.'''
        headers, body = build_command(service, action, args)
        log.info('Sending %s %s to %s', action, args, control_url)
        return await self.send(control_url, headers, body)

    async def browse(
            self,
            control_url: str,
            object_id: Optional[str],
            options: Optional[models.BrowseOptions] = None) -> bytes:
        # validate everything before going anywhere near the network
        args = browse_arguments(object_id, options or models.BrowseOptions())
        validate_control_url(control_url)
        return await self.send_command(
            control_url, SERVICE_CONTENT_DIRECTORY, 'Browse', args)
