from xml.sax import saxutils

import pytest

DIDL_HEADER = (
    '<DIDL-Lite xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/"'
    ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
    ' xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/"'
    ' xmlns:dlna="urn:schemas-dlna-org:metadata-1-0/">'
)

ENVELOPE_TEMPLATE = '''\
<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
  <s:Body>
    <u:BrowseResponse xmlns:u="urn:schemas-upnp-org:service:ContentDirectory:1">
      <Result>{result}</Result>
      <NumberReturned>{returned}</NumberReturned>
      <TotalMatches>{total}</TotalMatches>
      <UpdateID>{update_id}</UpdateID>
    </u:BrowseResponse>
  </s:Body>
</s:Envelope>
'''

# a trimmed-down MiniDLNA response: 2 containers and 3 items, where
# the second item has only a 5.1 stream and so is unplayable
CONTAINERS = '''\
<container id="64$1" parentID="64" restricted="1" childCount="12">
  <dc:title>Afro Celt Sound System</dc:title>
  <upnp:artist>Afro Celt Sound System</upnp:artist>
  <upnp:class>object.container.person.musicArtist</upnp:class>
</container>
<container id="64$2" parentID="64" restricted="1">
  <dc:title>Bj&#246;rk</dc:title>
  <upnp:class>object.container.person.musicArtist</upnp:class>
</container>
'''

ITEMS = '''\
<item id="64$0" parentID="64" restricted="1">
  <dc:title>Release</dc:title>
  <upnp:artist>Afro Celt Sound System</upnp:artist>
  <upnp:album>Volume 2: Release</upnp:album>
  <upnp:class>object.item.audioItem.musicTrack</upnp:class>
  <upnp:albumArtURI dlna:profileID="JPEG_TN">http://10.0.0.5:8200/AlbumArt/1.jpg</upnp:albumArtURI>
  <res duration="0:07:36.000" sampleFrequency="44100" bitsPerSample="16" nrAudioChannels="2" protocolInfo="http-get:*:audio/x-flac:*">http://10.0.0.5:8200/MediaItems/1.flac</res>
  <res duration="0:07:36.000" sampleFrequency="96000" bitsPerSample="24" nrAudioChannels="2" protocolInfo="http-get:*:audio/x-flac:*">http://10.0.0.5:8200/MediaItems/1-hires.flac</res>
</item>
<item id="64$3" parentID="64" restricted="1">
  <dc:title>Surround Only</dc:title>
  <upnp:class>object.item.audioItem.musicTrack</upnp:class>
  <res duration="0:04:00" sampleFrequency="48000" bitsPerSample="24" nrAudioChannels="6">http://10.0.0.5:8200/MediaItems/2.flac</res>
</item>
<item id="64$4" parentID="64" restricted="1">
  <dc:title>Whirl-Y-Reel 1</dc:title>
  <dc:creator>Afro Celt Sound System</dc:creator>
  <upnp:class>object.item.audioItem.musicTrack</upnp:class>
  <res duration="0:03:45.500" protocolInfo="http-get:*:audio/mpeg:*">http://10.0.0.5:8200/MediaItems/3.mp3</res>
</item>
'''


def make_didl(content: str) -> str:
    return DIDL_HEADER + content + '</DIDL-Lite>'


def make_envelope(didl: str, returned=5, total=5, update_id='17') -> str:
    '''Wrap a DIDL-Lite document in a Browse response, escaping it the
    way servers do.'''
    return ENVELOPE_TEMPLATE.format(
        result=saxutils.escape(didl),
        returned=returned,
        total=total,
        update_id=update_id,
    )


@pytest.fixture
def browse_response() -> bytes:
    return make_envelope(make_didl(CONTAINERS + ITEMS)).encode('utf-8')
