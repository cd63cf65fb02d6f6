# collectors receive the events emitted while extracting RDFa from a document.

import sys

import rdflib


class Collector:
    """Does nothing with anything it is given.

       Subclasses override the events they are interested in; the parser
       calls every one of these unconditionally."""

    def setBaseUri(self, uri):
        pass

    def setBlankNodeNamespace(self, namespace):
        pass

    def addNamespace(self, namespace):
        pass

    def addTriple(self, subject, predicate, obj):
        pass

    def addWarning(self, message):
        pass

    def addDebug(self, xml, message):
        pass


class DictionaryCollector(Collector):
    """Stores statements as {subject: {predicate: [object, ...]}}.

       Subjects and predicates are keyed by their string form; objects keep
       their rdflib type so URIs and literals can be told apart."""

    def __init__(self):
        self.baseUri = None
        self.bnodeNamespace = None
        self.namespaces = []
        self.triples = {}
        self.warnings = []
        self.debug = []

    def setBaseUri(self, uri):
        self.baseUri = uri

    def setBlankNodeNamespace(self, namespace):
        self.bnodeNamespace = namespace

    def addNamespace(self, namespace):
        if namespace not in self.namespaces:
            self.namespaces.append(namespace)

    def addTriple(self, subject, predicate, obj):
        predicates = self.triples.setdefault(str(subject), {})
        predicates.setdefault(str(predicate), []).append(obj)

    def addWarning(self, message):
        self.warnings.append(message)

    def addDebug(self, xml, message):
        self.debug.append((xml, message))

    def tripleCount(self):
        return sum(len(objects)
                   for predicates in self.triples.values()
                   for objects in predicates.values())


class ScreenCollector(Collector):
    """Prints statements as they arrive, one N-Triples-like line each."""

    def __init__(self, stream=None, print_debug=False):
        self.stream = stream if stream is not None else sys.stdout
        self.print_debug = print_debug

    def _write(self, line):
        print(line, file=self.stream)

    def setBaseUri(self, uri):
        self._write("# base_uri set to '{0}'".format(uri))

    def setBlankNodeNamespace(self, namespace):
        self._write("# BNode Namespace: {0}".format(namespace))

    def addNamespace(self, namespace):
        self._write("# Namespace Added: {0}".format(namespace))

    def addTriple(self, subject, predicate, obj):
        if isinstance(obj, rdflib.Literal):
            self._write('<{0}> <{1}> "{2}" .'.format(subject, predicate, obj))
        else:
            self._write('<{0}> <{1}> <{2}> .'.format(subject, predicate, obj))

    def addWarning(self, message):
        self._write("# Warning: {0}".format(message))

    def addDebug(self, xml, message):
        if self.print_debug:
            self._write("# Debug: {0}".format(message))
            self._write("# Debug XML: {0}".format(xml))


class GraphCollector(Collector):
    """Adds statements to an rdflib graph.

       URIs inside the blank node namespace become rdflib BNodes named after
       their local part."""

    def __init__(self, graph=None):
        self.graph = graph if graph is not None else rdflib.Graph()
        self.bnodeNamespace = None
        self.namespaces = []
        self.warnings = []

    def setBlankNodeNamespace(self, namespace):
        self.bnodeNamespace = namespace

    def addNamespace(self, namespace):
        if namespace not in self.namespaces:
            self.namespaces.append(namespace)

    def toNode(self, term):
        if (self.bnodeNamespace and isinstance(term, rdflib.URIRef)
                and term.startswith(self.bnodeNamespace)):
            return rdflib.BNode(term[len(self.bnodeNamespace):])
        return term

    def addTriple(self, subject, predicate, obj):
        self.graph.add((self.toNode(subject), predicate, self.toNode(obj)))

    def addWarning(self, message):
        self.warnings.append(message)
