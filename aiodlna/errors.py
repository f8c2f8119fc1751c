from typing import Any


class DLNAError(Exception):
    '''Base class for everything aiodlna raises.'''
    pass


class ValidationError(DLNAError):
    '''Raised for malformed caller input: a missing object ID, a bogus
    control URL, or nonsensical browse options. Nothing has been sent over
    the network when this is raised.
    '''
    pass


class TransportError(DLNAError):
    '''Raised if the HTTP round trip to the media server fails: connection
    refused, timeout, aborted response, etc.
    '''
    pass


class ParseError(DLNAError):
    '''Raised if the server's response (or the DIDL-Lite document embedded
    in it) is not well-formed XML.
    '''
    pass


class ProtocolError(DLNAError):
    '''Raised if the response is well-formed XML but does not have the
    structure of a Browse response.

    The parsed tree is available as ``tree`` for diagnostics.
    '''
    def __init__(self, message: str, tree: Any = None):
        super().__init__(message)
        self.tree = tree


class UPnPFaultError(ProtocolError):
    """A UPnP Fault Code, returned by the server in response to a Browse
    action.
    """
    def __init__(
            self,
            url: str,
            error_code: str,
            error_xml: str,
            error_description: str = "",
            tree: Any = None):
        """
        Args:
            url (str): The control URL the action was sent to.
            error_code (str): The UPnP Error Code as a string.
            error_xml (str): The xml containing the error.
            error_description (str): A description of the error. Default is ""
            tree: The parsed response, if available.
        """
        self.error_code = error_code
        self.error_description = error_description
        self.error_xml = error_xml
        self.url = url
        message = "UPnP Error {} received: {} from {}".format(
            error_code, error_description, url)
        super().__init__(message, tree)


class NoPlayableStreamError(DLNAError):
    '''Raised while mapping a single item when none of its ``<res>``
    elements is playable. The item is dropped from the listing; the browse
    call as a whole carries on.
    '''
    def __init__(self, title: str, num_candidates: int):
        super().__init__(
            'no playable stream for {!r} ({} candidates)'.format(
                title, num_candidates))
        self.title = title
        self.num_candidates = num_candidates
