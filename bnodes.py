# blank node naming for elements that stand in for anonymous resources.

DEFAULT_BNODE_NAMESPACE = 'tag:rdfaify,2014:bnode#'
DEFAULT_BNODE_PREFIX = '_a'


class CounterGenerator:
    """Names blank nodes namespace + prefix + counter.

       Remembers the name handed out for each element, keyed on the element
       object itself, so asking twice for the same element gives the same name.
       The table lives until reset()."""

    def __init__(self, namespace='', prefix=None):
        self.reset()
        self.namespace = namespace
        self.prefix = prefix if prefix is not None else DEFAULT_BNODE_PREFIX

    def generate(self, node):
        # lxml elements hash by identity; keeping them as keys also keeps
        # their proxies alive, so the same element always maps back here
        if node not in self._bnodes:
            self._counter += 1
            self._bnodes[node] = self._counter
        return "{0}{1}{2}".format(self.namespace, self.prefix, self._bnodes[node])

    def reset(self):
        self._bnodes = {}
        self._counter = 0
