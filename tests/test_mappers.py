from xml.etree import ElementTree

from didl_lite import didl_lite as didl
from didl_lite.utils import NAMESPACES

from aiodlna import errors, mappers, models, xmltree

from conftest import make_didl


def parse_node(xml: str, tag: str) -> ElementTree.Element:
    element = xmltree.parse_element(make_didl(xml)).find('didl_lite:' + tag, NAMESPACES)
    assert element is not None
    return element


ITEM_XML = '''\
<item id="64$0" parentID="64" restricted="1">
  <dc:title>Release</dc:title>
  <upnp:artist>Afro Celt Sound System</upnp:artist>
  <upnp:album>Volume 2: Release</upnp:album>
  <upnp:class>object.item.audioItem.musicTrack</upnp:class>
  <upnp:albumArtURI>http://10.0.0.5:8200/AlbumArt/1.jpg</upnp:albumArtURI>
  <res duration="0:07:36.000" sampleFrequency="44100" bitsPerSample="16" nrAudioChannels="2">http://10.0.0.5:8200/1.flac</res>
  <res duration="0:07:36.000" sampleFrequency="96000" bitsPerSample="24" nrAudioChannels="2">http://10.0.0.5:8200/1-hires.flac</res>
</item>'''


def test_map_container():
    node = parse_node('''\
<container id="64$1" parentID="64" restricted="1" childCount="12">
  <dc:title>Afro Celt Sound System</dc:title>
  <upnp:artist>Afro Celt Sound System</upnp:artist>
  <upnp:class>object.container.person.musicArtist</upnp:class>
</container>''', 'container')
    container = mappers.map_container(node)
    assert container == models.Container(
        upnp_class='object.container.person.musicArtist',
        title='Afro Celt Sound System',
        id='64$1',
        parent_id='64',
        child_count='12',
        artist='Afro Celt Sound System',
    )


def test_map_container_missing_fields():
    container = mappers.map_container(parse_node('<container/>', 'container'))
    assert container.title == ''
    assert container.upnp_class == ''
    assert container.id == ''
    assert container.parent_id == ''
    assert container.child_count == ''
    assert container.artist is None


def test_map_container_best_effort(monkeypatch):
    node = parse_node(
        '<container id="7"><dc:title>Jazz</dc:title><upnp:class>x</upnp:class></container>',
        'container')
    real_text = mappers._text

    def broken_text(obj, tag):
        if tag == 'upnp:class':
            raise RuntimeError('boom')
        return real_text(obj, tag)

    monkeypatch.setattr(mappers, '_text', broken_text)
    container = mappers.map_container(node)
    # the fields before the class were read before things went wrong
    assert container.title == 'Jazz'
    assert container.upnp_class == ''
    assert container.id == ''


def test_from_element():
    obj = mappers.from_element(parse_node(ITEM_XML, 'item'))
    assert isinstance(obj, didl.MusicTrack)

    # unknown or missing classes fall back to the generic kind
    obj = mappers.from_element(parse_node(
        '<item><upnp:class>object.item.audioItem.musicTrack.flac</upnp:class></item>', 'item'))
    assert type(obj) is didl.Item
    obj = mappers.from_element(parse_node('<container/>', 'container'))
    assert type(obj) is didl.Container
    # a container can't be an item, whatever its class says
    obj = mappers.from_element(parse_node(
        '<item><upnp:class>object.container.album</upnp:class></item>', 'item'))
    assert type(obj) is didl.Item


def test_map_item():
    node = parse_node(ITEM_XML, 'item')
    outcome = mappers.map_item(node)
    assert outcome.ok
    item = outcome.record
    assert item.id == '64$0'
    assert item.parent_id == '64'
    assert item.title == 'Release'
    assert item.artist == 'Afro Celt Sound System'
    assert item.album == 'Volume 2: Release'
    assert item.upnp_class == 'object.item.audioItem.musicTrack'
    assert item.image_url == 'http://10.0.0.5:8200/AlbumArt/1.jpg'
    assert item.source_url == 'http://10.0.0.5:8200/1-hires.flac'
    assert item.duration == 456
    assert item.resource.sample_frequency == 96000
    assert item.resource.bits_per_sample == 24


def test_map_item_minimal():
    node = parse_node(
        '<item><res duration="0:03:45.500">http://x/3.mp3</res></item>', 'item')
    item = mappers.map_item(node).record
    assert item.source_url == 'http://x/3.mp3'
    assert item.duration == 225
    assert (item.id, item.title, item.artist, item.album, item.image_url) == \
        ('', '', '', '', '')


def test_map_item_creator_fallback():
    node = parse_node(
        '<item><dc:creator>Björk</dc:creator><res>http://x/1</res></item>', 'item')
    assert mappers.map_item(node).record.artist == 'Björk'


def test_map_item_bad_duration():
    node = parse_node(
        '<item><res duration="NOT_IMPLEMENTED">http://x/1</res></item>', 'item')
    item = mappers.map_item(node).record
    assert item.duration is None
    assert item.source_url == 'http://x/1'


def test_map_item_no_duration():
    node = parse_node('<item><res>http://x/1</res></item>', 'item')
    assert mappers.map_item(node).record.duration is None


def test_map_item_no_playable_stream():
    node = parse_node('''\
<item id="2">
  <dc:title>Surround Only</dc:title>
  <res sampleFrequency="48000" bitsPerSample="24" nrAudioChannels="6">http://x/2.flac</res>
</item>''', 'item')
    outcome = mappers.map_item(node)
    assert not outcome.ok
    assert outcome.record is None
    assert isinstance(outcome.error, errors.NoPlayableStreamError)
    assert outcome.error.title == 'Surround Only'
    assert outcome.error.num_candidates == 1


def test_map_item_no_resources():
    # no <res> at all, or only empty ones: nothing to play
    for xml in ['<item><dc:title>x</dc:title></item>',
                '<item><res sampleFrequency="44100"></res></item>']:
        outcome = mappers.map_item(parse_node(xml, 'item'))
        assert isinstance(outcome.error, errors.NoPlayableStreamError)


def test_map_item_unexpected_error(monkeypatch):
    node = parse_node('<item><res>http://x/1</res></item>', 'item')

    def broken_select(candidates):
        raise KeyError('boom')

    monkeypatch.setattr(mappers.streams, 'select_best', broken_select)
    outcome = mappers.map_item(node)
    assert not outcome.ok
    assert isinstance(outcome.error, KeyError)


def test_map_item_first_artist():
    node = parse_node('''\
<item>
  <upnp:artist role="Composer">Johann Sebastian Bach</upnp:artist>
  <upnp:artist role="Performer">Glenn Gould</upnp:artist>
  <upnp:class>object.item.audioItem.musicTrack</upnp:class>
  <res>http://x/1</res>
</item>''', 'item')
    item = mappers.map_item(node).record
    assert item.artist == 'Johann Sebastian Bach'
    assert item.upnp_class == 'object.item.audioItem.musicTrack'


def test_parse_resource():
    res = didl.Resource(
        ' http://x/1 ', 'http-get:*:audio/mpeg:*',
        duration='0:01:00', sample_frequency='44100', bits_per_sample='16')
    assert mappers.parse_resource(res) == models.Resource(
        uri='http://x/1',
        sample_frequency=44100,
        bits_per_sample=16,
        nr_audio_channels=None,
        duration='0:01:00',
        protocol_info='http-get:*:audio/mpeg:*',
    )


def test_parse_resource_fractional():
    res = didl.Resource(
        'http://x/1', None,
        sample_frequency='352800.0', bits_per_sample='24.0', nr_audio_channels='2')
    resource = mappers.parse_resource(res)
    assert (resource.sample_frequency, resource.bits_per_sample, resource.nr_audio_channels) \
        == (352800, 24, 2)
    assert not resource.bad_format


def test_parse_resource_non_numeric():
    for attrs in [{'sample_frequency': '44.1kHz'},
                  {'bits_per_sample': 'high'},
                  {'nr_audio_channels': 'stereo'},
                  {'sample_frequency': 'inf'}]:
        res = didl.Resource('http://x/1', 'http-get:*:audio/mpeg:*', **attrs)
        resource = mappers.parse_resource(res)
        assert resource.bad_format, attrs
        assert resource.uri == 'http://x/1'
        assert resource.protocol_info == 'http-get:*:audio/mpeg:*'


def test_parse_resource_empty_attrs():
    res = didl.Resource('http://x/1', None, sample_frequency='', bits_per_sample=' ')
    resource = mappers.parse_resource(res)
    assert not resource.bad_format
    assert resource.sample_frequency is None
    assert resource.bits_per_sample is None


def test_map_item_out_of_range_fractional():
    node = parse_node(
        '<item id="1"><res sampleFrequency="352800.0" bitsPerSample="32">http://x/dsd</res></item>',
        'item')
    outcome = mappers.map_item(node)
    assert isinstance(outcome.error, errors.NoPlayableStreamError)


def test_map_item_fractional_bit_depth():
    node = parse_node('''\
<item id="1">
  <res sampleFrequency="48000" nrAudioChannels="2" bitsPerSample="24.0">http://x/24</res>
  <res sampleFrequency="48000" nrAudioChannels="2" bitsPerSample="16">http://x/16</res>
</item>''', 'item')
    item = mappers.map_item(node).record
    assert item.source_url == 'http://x/24'
    assert item.resource.bits_per_sample == 24


def test_map_item_non_numeric_format():
    # a format we can't read is not a format we can play
    node = parse_node(
        '<item id="1"><res sampleFrequency="352.8k">http://x/dsd</res></item>', 'item')
    outcome = mappers.map_item(node)
    assert isinstance(outcome.error, errors.NoPlayableStreamError)
    assert outcome.error.num_candidates == 1

    node = parse_node('''\
<item id="1">
  <res sampleFrequency="352.8k" nrAudioChannels="2">http://x/dsd</res>
  <res sampleFrequency="44100" nrAudioChannels="2">http://x/cd</res>
</item>''', 'item')
    assert mappers.map_item(node).record.source_url == 'http://x/cd'
