import enum
from typing import Optional, Generic, List, NamedTuple, TypeVar, Union

from . import errors

T = TypeVar('T')


def stdrepr(self):
    return '<{} at {:x}: {}>'.format(self.__class__.__name__, id(self), self)


class BrowseFlag(enum.Enum):
    DIRECT_CHILDREN = 'BrowseDirectChildren'
    METADATA = 'BrowseMetadata'

    def __str__(self) -> str:
        return self.value


class BrowseOptions(NamedTuple):
    '''Arguments of a single Browse action, apart from the object ID.

    Falsy fields are replaced with the defaults by `with_defaults()`,
    which is what the request builder serializes.
    '''
    browse_flag: Union[None, str, BrowseFlag] = None
    filter: Optional[str] = None
    start_index: Optional[int] = None
    request_count: Optional[int] = None
    sort: Optional[str] = None

    def with_defaults(self) -> 'BrowseOptions':
        flag = self.browse_flag or BrowseFlag.DIRECT_CHILDREN
        try:
            flag = BrowseFlag(flag)
        except ValueError:
            raise errors.ValidationError(
                'unknown browse flag: {!r}'.format(flag)) from None
        start_index = self.start_index or 0
        request_count = self.request_count or 1000
        if start_index < 0:
            raise errors.ValidationError(
                'start_index must not be negative (got {})'.format(start_index))
        if request_count < 0:
            raise errors.ValidationError(
                'request_count must be positive (got {})'.format(request_count))
        return BrowseOptions(
            browse_flag=flag,
            filter=self.filter or '*',
            start_index=start_index,
            request_count=request_count,
            sort=self.sort or '',
        )


class Resource(NamedTuple):
    '''One ``<res>`` element of an item: a URI plus its audio format.'''
    uri: str
    sample_frequency: Optional[int] = None
    bits_per_sample: Optional[int] = None
    nr_audio_channels: Optional[int] = None
    duration: Optional[str] = None
    protocol_info: Optional[str] = None
    #: true if the server sent a format attribute we couldn't understand
    bad_format: bool = False

    def describe_format(self) -> str:
        if self.bad_format:
            return 'unknown format'

        def fmt(value):
            return '?' if value is None else str(value)
        return '{}Hz, {} bits, {} channels'.format(
            fmt(self.sample_frequency),
            fmt(self.bits_per_sample),
            fmt(self.nr_audio_channels))


class Container:
    '''A folder in the media server's content tree.'''
    upnp_class: str
    title: str
    id: str
    parent_id: str
    child_count: str
    artist: Optional[str]

    def __init__(
            self,
            upnp_class: str = '',
            title: str = '',
            id: str = '',
            parent_id: str = '',
            child_count: str = '',
            artist: Optional[str] = None):
        self.upnp_class = upnp_class
        self.title = title
        self.id = id
        self.parent_id = parent_id
        self.child_count = child_count
        self.artist = artist

    def __eq__(self, other) -> bool:
        return (isinstance(other, self.__class__) and
                vars(self) == vars(other))

    def __str__(self) -> str:
        return '{} {!r}'.format(self.id, self.title)

    __repr__ = stdrepr


class Item:
    '''A playable track, with the single best resource already chosen.'''
    upnp_class: str
    id: str
    title: str
    artist: str
    album: str
    parent_id: str
    duration: Optional[int]
    source_url: str
    image_url: str
    resource: Optional[Resource]

    def __init__(
            self,
            source_url: str,
            upnp_class: str = '',
            id: str = '',
            title: str = '',
            artist: str = '',
            album: str = '',
            parent_id: str = '',
            duration: Optional[int] = None,
            image_url: str = '',
            resource: Optional[Resource] = None):
        self.source_url = source_url
        self.upnp_class = upnp_class
        self.id = id
        self.title = title
        self.artist = artist
        self.album = album
        self.parent_id = parent_id
        self.duration = duration
        self.image_url = image_url
        self.resource = resource

    def __eq__(self, other) -> bool:
        return (isinstance(other, self.__class__) and
                vars(self) == vars(other))

    def __str__(self) -> str:
        return '{} {!r}'.format(self.id, self.title)

    __repr__ = stdrepr


class MapResult(Generic[T]):
    '''The outcome of mapping one DIDL-Lite node: either a record or the
    error that prevented building one.
    '''
    record: Optional[T]
    error: Optional[Exception]

    def __init__(self, record: Optional[T] = None, error: Optional[Exception] = None):
        assert (record is None) != (error is None), \
            'MapResult needs exactly one of record or error'
        self.record = record
        self.error = error

    @classmethod
    def success(cls, record: T) -> 'MapResult[T]':
        return cls(record=record)

    @classmethod
    def failure(cls, error: Exception) -> 'MapResult[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.ok:
            return 'ok: {}'.format(self.record)
        return 'failed: {}'.format(self.error)

    __repr__ = stdrepr


class BrowseResult:
    '''The listing returned by one Browse call.

    ``containers`` or ``items`` is None if the DIDL-Lite document had no
    element of that kind at all (as opposed to having only unplayable
    items, which gives an empty list).
    '''
    containers: Optional[List[Container]]
    items: Optional[List[Item]]
    number_returned: Optional[int]
    total_matches: Optional[int]
    update_id: Optional[str]

    def __init__(
            self,
            containers: Optional[List[Container]] = None,
            items: Optional[List[Item]] = None,
            number_returned: Optional[int] = None,
            total_matches: Optional[int] = None,
            update_id: Optional[str] = None):
        self.containers = containers
        self.items = items
        self.number_returned = number_returned
        self.total_matches = total_matches
        self.update_id = update_id

    def __str__(self) -> str:
        return '{} containers, {} items'.format(
            len(self.containers or ()), len(self.items or ()))

    __repr__ = stdrepr
