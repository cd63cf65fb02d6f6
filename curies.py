# namespace scoping and CURIE / URI reference resolution for RDFa attributes.

import re
from urllib.parse import urljoin, urlsplit

import rdflib

XMLNS_PREFIX = 'xmlns:'

# characters that may never appear in a URI reference, on top of whitespace/control
INVALID_URI_CHARS = '<>"{}|^`\\'

SAFE_CURIE_RE = re.compile(r'^\[(.*)\]$', re.DOTALL)


class RdfaError(ValueError):
    """Base class for recoverable and fatal RDFa extraction errors."""


class InvalidNamespaceDeclaration(RdfaError):
    pass


class InvalidCurie(RdfaError):
    pass


class InvalidUri(RdfaError):
    pass


def parseUri(value):
    """Checks that `value` is a syntactically usable URI reference and
       returns its split form. Raises InvalidUri otherwise."""
    if any(ord(ch) <= 0x20 or ch in INVALID_URI_CHARS for ch in value):
        raise InvalidUri('invalid uri: {0}'.format(value))
    try:
        parts = urlsplit(value)
        # port parsing is lazy in urlsplit; touch it so bad ports fail here
        parts.port
    except ValueError:
        raise InvalidUri('invalid uri: {0}'.format(value))
    return parts


def isAbsoluteUri(value):
    return bool(parseUri(value).scheme)


def localNamespaceDeclarations(node):
    """Returns the (prefix, value) pairs declared on `node` itself, in prefix order.

       lxml folds xmlns:* into nsmap when parsing XML, so those are found by
       diffing against the parent; the HTML parser keeps them as attributes."""
    declared = {}

    parent = node.getparent()
    parent_nsmap = parent.nsmap if parent is not None else {}
    for prefix, uri in node.nsmap.items():
        # the default namespace is not a CURIE prefix
        if prefix is None:
            continue
        if parent_nsmap.get(prefix) != uri:
            declared[prefix] = uri

    for name, value in node.items():
        if name.startswith(XMLNS_PREFIX):
            declared[name[len(XMLNS_PREFIX):]] = value

    return sorted(declared.items())


def deriveNamespaces(parent_scope, node):
    """Copies `parent_scope` and overlays the namespaces declared on `node`.

       Returns (child_scope, declared, errors): `declared` lists each newly
       bound namespace URI, `errors` holds one InvalidNamespaceDeclaration per
       rejected declaration. The parent scope is never modified."""
    scope = dict(parent_scope)
    declared = []
    errors = []

    for prefix, value in localNamespaceDeclarations(node):
        value = value.strip()
        try:
            absolute = isAbsoluteUri(value)
        except InvalidUri as e:
            errors.append(InvalidNamespaceDeclaration(str(e)))
            continue
        if not absolute:
            errors.append(InvalidNamespaceDeclaration(
                'namespaces must be absolute URIs: {0}'.format(value)))
            continue
        scope[prefix] = value
        declared.append(value)

    return scope, declared, errors


def resolveCurie(scope, value):
    """Expands a CURIE such as foaf:Person against `scope`.

       A value without any colon is taken as a plain URI reference.
       Returns None for a None value."""
    if value is None:
        return None

    split_value = value.split(':')
    if len(split_value) == 1:
        parseUri(value)
        return rdflib.URIRef(value)
    if len(split_value) > 2:
        raise InvalidCurie('invalid curie value: {0}'.format(value))

    prefix, reference = split_value
    if prefix not in scope:
        raise InvalidCurie(
            'invalid curie, namespace prefix not found for {0}'.format(value))
    uri = scope[prefix] + reference
    parseUri(uri)
    return rdflib.URIRef(uri)


def resolveReference(scope, base_uri, value):
    """Resolves an attribute value that is either a [safe CURIE] or a URI
       reference. Relative references are joined to `base_uri` when there is
       one and passed through untouched when there isn't."""
    if value is None:
        return None

    m = SAFE_CURIE_RE.match(value)
    if m:
        return resolveCurie(scope, m.group(1))

    parts = parseUri(value)
    if not parts.scheme and base_uri:
        return rdflib.URIRef(urljoin(base_uri, value))
    return rdflib.URIRef(value)

