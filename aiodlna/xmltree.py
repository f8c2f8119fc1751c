'''a namespace-agnostic tree for XML documents from media servers'''

from xml.etree import ElementTree
from typing import Any, Dict, List, Optional, Union

from . import errors, utils
from .models import stdrepr


class XMLNode:
    '''One element of a parsed document, with namespaces stripped.

    ``children`` maps each local tag name to the list of child elements
    with that name, in document order. The node returned by `parse_xml()`
    is a nameless document node whose only child is the root element.
    ``element`` is the ElementTree element the node was built from, with
    its namespaces intact.
    '''
    tag: str
    attrib: Dict[str, str]
    text: str
    children: Dict[str, List['XMLNode']]
    element: Optional[ElementTree.Element]

    def __init__(self, tag: str = '', attrib: Optional[Dict[str, str]] = None, text: str = ''):
        self.tag = tag
        self.attrib = attrib or {}
        self.text = text
        self.children = {}
        self.element = None

    @classmethod
    def from_element(cls, element: ElementTree.Element) -> 'XMLNode':
        attrib = {utils.strip_namespace(name): value
                  for (name, value) in element.attrib.items()}
        node = cls(utils.strip_namespace(element.tag), attrib, (element.text or '').strip())
        node.element = element
        for child in element:
            node.append(cls.from_element(child))
        return node

    def append(self, child: 'XMLNode') -> None:
        self.children.setdefault(child.tag, []).append(child)

    def get(self, tag: str) -> List['XMLNode']:
        '''Return all children named tag (maybe an empty list).'''
        return self.children.get(tag, [])

    def first(self, tag: str) -> Optional['XMLNode']:
        '''Return the first child named tag, or None.'''
        nodes = self.children.get(tag)
        return nodes[0] if nodes else None

    def findtext(self, tag: str, default: Any = '') -> Any:
        '''Return the text of the first child named tag, or default if
        there is no such child or it has no text.'''
        node = self.first(tag)
        if node is None or not node.text:
            return default
        return node.text

    def attr(self, name: str, default: Any = '') -> Any:
        return self.attrib.get(name, default)

    def path(self, *tags: str) -> Optional['XMLNode']:
        '''Follow the first child named by each tag in turn, returning
        None as soon as one is missing.'''
        node: Optional[XMLNode] = self
        for tag in tags:
            assert node is not None
            node = node.first(tag)
            if node is None:
                return None
        return node

    def to_dict(self) -> Dict[str, Any]:
        '''Return a plain dict version of this node: attributes under
        ``"$"``, text under ``"_"``, and each child tag mapped to a list.
        Useful for dumping in error messages.'''
        result: Dict[str, Any] = {}
        if self.attrib:
            result['$'] = dict(self.attrib)
        if self.text:
            result['_'] = self.text
        for (tag, nodes) in self.children.items():
            result[tag] = [node.to_dict() for node in nodes]
        return result

    def __str__(self) -> str:
        return '<{}> ({} child tags)'.format(self.tag or '#document', len(self.children))

    __repr__ = stdrepr


def parse_element(xml_text: Union[bytes, str]) -> ElementTree.Element:
    '''Parse an XML document and return its root element, namespaces
    and all.

    HTML entities are decoded before parsing (see `utils.decode_entities`).

    Raises:
        `ParseError`: if the text is not well-formed XML.
    '''
    if isinstance(xml_text, bytes):
        xml_text = xml_text.decode('utf-8', errors='replace')
    xml_text = utils.decode_entities(xml_text)
    try:
        return ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as err:
        raise errors.ParseError('malformed XML: {}'.format(err)) from err


def parse_xml(xml_text: Union[bytes, str]) -> XMLNode:
    '''Parse an XML document into a tree of `XMLNode`.

    Raises:
        `ParseError`: if the text is not well-formed XML.
    '''
    document = XMLNode()
    document.append(XMLNode.from_element(parse_element(xml_text)))
    return document
