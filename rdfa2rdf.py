# extraction of RDFa statements from an (X)HTML element tree.

# The tree is walked breadth first. Every element that carries rel, rev or
# property gets a subject from the nearest "about node" above it, and the
# statements are handed to a collector as they are found. Anything wrong with
# a single attribute is reported to the collector as a warning and the walk
# carries on.

import logging
from collections import deque
from xml.sax.saxutils import escape

import lxml.etree
import rdflib

from bnodes import CounterGenerator, DEFAULT_BNODE_NAMESPACE
from collectors import DictionaryCollector
from curies import (RdfaError, InvalidUri, deriveNamespaces, isAbsoluteUri,
                    resolveCurie, resolveReference)

logger = logging.getLogger("rdfaify.rdfa2rdf")

LINK_META_TAGS = ('link', 'meta')


class FatalInputError(RdfaError):
    """The document can't be processed at all (no root, bad base URI)."""


def isElement(node):
    # comments and processing instructions have a callable as their tag
    return isinstance(node.tag, str)


def localName(node):
    # {namespace}local -> local; html parser tags may contain a colon, which QName rejects
    return node.tag.split('}')[-1]


def findHeadElement(root):
    """Returns the head element of an html document, or None."""
    head = None
    if localName(root) == 'html':
        for child in root:
            if isElement(child) and localName(child) == 'head':
                head = child
    return head


def findAboutNode(startnode, max_traversal=None):
    """Finds the element whose identity is the subject for `startnode`.

       Walks up from `startnode` until one of:
       1. an element with an about attribute (startnode included)
       2. an ancestor with rel or rev but no href
       3. more than `max_traversal` elements have been looked at

       Returns None when the walk runs off the top of the document, which
       means the subject is the document itself."""
    current_node = startnode
    count = 0
    while current_node is not None:
        if current_node.get('about') is not None:
            return current_node

        if current_node is not startnode \
        and (current_node.get('rel') is not None or current_node.get('rev') is not None) \
        and current_node.get('href') is None:
            return current_node

        count += 1
        if max_traversal is not None and count > max_traversal:
            return current_node

        current_node = current_node.getparent()
    return None


def aboutUriFromNode(name_generator, node, is_head):
    """Returns the (unresolved) about value for an about node."""
    # no node: the subject is the document
    if node is None:
        return ''
    about = node.get('about')
    if about is not None:
        return about
    # a link/meta parent (possibly the xhtml head), or an ancestor with rel/rev and no href
    return bnodeUriFromNode(name_generator, node, is_head)


def bnodeUriFromNode(name_generator, node, blank_over_bnode=False):
    """Returns '#id' for an element with an id, otherwise its blank node name.
       With `blank_over_bnode` an element without id stands for the document."""
    node_id = node.get('id')
    if node_id is not None:
        return "#{0}".format(node_id)
    if blank_over_bnode:
        return ''
    return name_generator.generate(node)


def serializeContents(node):
    """Returns the markup inside `node` as a string, or None when it is empty."""
    if not node.text and not len(node):
        return None
    return escape(node.text or '') + ''.join(
        lxml.etree.tostring(child, encoding='unicode') for child in node)


def emitTriple(collector, subject, predicate, obj):
    # every position has to be known
    if subject is None or predicate is None or obj is None:
        return
    collector.addTriple(subject, predicate, obj)


def emitWarning(collector, node, error):
    message = str(error)
    logger.info("%s: %s", localName(node), message)
    collector.addWarning(message)
    collector.addDebug(
        lxml.etree.tostring(node, encoding='unicode', with_tail=False), message)


def processNode(node, namespaces, head, base_uri, name_generator, collector):
    """Emits the rel, rev and property statements of a single element.

       The about, href, rel, rev and property steps fail independently of
       each other; a failure only costs the statements that needed it."""
    rel = node.get('rel')
    rev = node.get('rev')
    prop = node.get('property')

    # nothing to say about this element
    if rel is None and rev is None and prop is None:
        return

    href = node.get('href')
    content = node.get('content')

    # about: link and meta only look one element up, and when that is the
    # xhtml head the subject is the document rather than a blank node
    about_uri = None
    try:
        link_meta = localName(node) in LINK_META_TAGS
        max_traversal = 1 if link_meta else None
        about_node = findAboutNode(node, max_traversal)
        is_head = link_meta and head is not None and about_node is head
        about_pre = aboutUriFromNode(name_generator, about_node, is_head)
        about_uri = resolveReference(namespaces, base_uri, about_pre)
    except RdfaError as e:
        emitWarning(collector, node, e)

    # href: without one, a rel/rev element stands for its own object
    href_uri = None
    try:
        href_uri = resolveReference(namespaces, base_uri, href)
        if href_uri is None and (rel is not None or rev is not None):
            href_pre = bnodeUriFromNode(name_generator, node)
            href_uri = resolveReference(namespaces, base_uri, href_pre)
    except RdfaError as e:
        emitWarning(collector, node, e)

    if rel is not None:
        try:
            rel_uri = resolveCurie(namespaces, rel)
            emitTriple(collector, about_uri, rel_uri, href_uri)
        except RdfaError as e:
            emitWarning(collector, node, e)

    if rev is not None:
        try:
            rev_uri = resolveCurie(namespaces, rev)
            emitTriple(collector, href_uri, rev_uri, about_uri)
        except RdfaError as e:
            emitWarning(collector, node, e)

    if prop is not None:
        try:
            property_uri = resolveCurie(namespaces, prop)
            # no content attribute: the literal is the markup inside the element
            if content is None:
                content = serializeContents(node)
            if content is not None:
                emitTriple(collector, about_uri, property_uri, rdflib.Literal(content))
        except RdfaError as e:
            emitWarning(collector, node, e)


def parseRdfaDocument(document, base_uri=None, collector=None,
                      bnode_namespace=None, bnode_prefix=None, name_generator=None):
    """Extracts the RDFa statements of an lxml document (or root element)
       into `collector` and returns the collector.

       A DictionaryCollector is used when no collector is given. Raises
       FatalInputError when there is no root element or `base_uri` is not
       absolute; every other problem ends up as a collector warning."""
    if collector is None:
        collector = DictionaryCollector()
    if name_generator is None:
        name_generator = CounterGenerator()
    if bnode_prefix is not None:
        name_generator.prefix = bnode_prefix

    if document is not None and hasattr(document, 'getroot'):
        root = document.getroot()
    else:
        root = document
    if root is None:
        raise FatalInputError('No root element for xml document')

    if base_uri is not None:
        try:
            absolute = isAbsoluteUri(base_uri)
        except InvalidUri:
            absolute = False
        if not absolute:
            raise FatalInputError('base_uri must be an absolute URI')

    if bnode_namespace is None:
        bnode_namespace = DEFAULT_BNODE_NAMESPACE
    name_generator.namespace = bnode_namespace

    logger.debug("extracting RDFa, base_uri=%s bnode_namespace=%s", base_uri, bnode_namespace)

    if base_uri is not None:
        collector.setBaseUri(base_uri)
    collector.setBlankNodeNamespace(bnode_namespace)

    head = findHeadElement(root)

    visited = 0
    queue = deque([(root, {'_': bnode_namespace})])
    while queue:
        node, parent_namespaces = queue.popleft()
        visited += 1

        namespaces, declared, errors = deriveNamespaces(parent_namespaces, node)
        for namespace in declared:
            collector.addNamespace(namespace)
        for e in errors:
            emitWarning(collector, node, e)

        # children share this element's namespaces, in document order
        for child in node:
            if isElement(child):
                queue.append((child, namespaces))

        processNode(node, namespaces, head, base_uri, name_generator, collector)

    logger.debug("visited %d elements", visited)

    return collector


def parseRdfaTree(parse, source, html=False, encoding=None, **options):
    if html:
        tree = parse(source, lxml.etree.HTMLParser(encoding=encoding))
    else:
        try:
            tree = parse(source)
        except lxml.etree.XMLSyntaxError as e:
            # not well formed; try again as tag soup
            logger.debug("XML parsing failed (%s), retrying as HTML", e)
            try:
                tree = parse(source, lxml.etree.HTMLParser(encoding=encoding))
            except lxml.etree.LxmlError:
                tree = None
    return parseRdfaDocument(tree, **options)


def parseRdfaString(source, html=False, **options):
    """Parses markup from a string and extracts its RDFa statements.

       Takes the same keyword options as parseRdfaDocument."""
    encoding = None
    if isinstance(source, str):
        # lxml refuses str input that carries an encoding declaration
        source = source.encode('utf-8')
        encoding = 'utf-8'
    return parseRdfaTree(lxml.etree.fromstring, source, html, encoding, **options)


def parseRdfaFile(source, html=False, **options):
    """Like parseRdfaString, for a filename, URL or file object."""
    if hasattr(source, 'read'):
        # streams can only be read once, and the HTML retry needs the markup again
        return parseRdfaString(source.read(), html=html, **options)
    return parseRdfaTree(lxml.etree.parse, source, html, **options)


class RdfaParser:
    """Reusable parser; the blank node table is reset for every document."""

    def __init__(self, base_uri=None, bnode_namespace=None, bnode_prefix=None,
                 name_generator=None, collector_factory=DictionaryCollector):
        self.base_uri = base_uri
        self.collector_factory = collector_factory
        self.bnode_namespace = bnode_namespace
        self.name_generator = name_generator if name_generator is not None \
            else CounterGenerator(prefix=bnode_prefix)
        if bnode_prefix is not None:
            self.name_generator.prefix = bnode_prefix

    def reset(self):
        self.name_generator.reset()

    def parse(self, source, collector=None, base_uri=None, html=False):
        self.reset()
        return parseRdfaString(
            source, html=html,
            base_uri=base_uri if base_uri is not None else self.base_uri,
            collector=collector if collector is not None else self.collector_factory(),
            bnode_namespace=self.bnode_namespace,
            name_generator=self.name_generator)
