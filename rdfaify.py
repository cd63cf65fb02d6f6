# command line extraction of RDFa statements from (X)HTML documents.

import argparse
import logging
import sys

import rdflib

from bnodes import DEFAULT_BNODE_NAMESPACE
from collectors import GraphCollector, ScreenCollector
from rdfa2rdf import FatalInputError, parseRdfaFile

logger = logging.getLogger("rdfaify")


def buildArgumentParser():
    argparser = argparse.ArgumentParser(
        description='Extract RDFa statements from an (X)HTML document.')
    argparser.add_argument('htmlfile', help='document to read, or - for stdin')
    argparser.add_argument('-b', '--base-uri', default=None)
    argparser.add_argument('-n', '--bnode-namespace', default=DEFAULT_BNODE_NAMESPACE)
    argparser.add_argument('-p', '--bnode-prefix', default=None)
    argparser.add_argument('-t', '--output-type', default='n3')
    argparser.add_argument('-o', '--outfile', default=None)
    argparser.add_argument('--screen', action='store_true',
                           help='print statements as they are found instead of serializing a graph')
    argparser.add_argument('--html', action='store_true',
                           help='parse with the HTML parser even when the input is well formed XML')
    argparser.add_argument('-w', '--warnings', action='store_true',
                           help='print warnings to stderr')
    argparser.add_argument('-v', '--verbose', action='store_true')
    return argparser


def main(argv=None):
    args = buildArgumentParser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s - %(message)s',
    )

    source = sys.stdin.buffer if args.htmlfile == '-' else args.htmlfile

    if args.screen:
        collector = ScreenCollector(print_debug=args.verbose)
    else:
        collector = GraphCollector(rdflib.Graph())

    try:
        parseRdfaFile(source, html=args.html,
                      base_uri=args.base_uri,
                      collector=collector,
                      bnode_namespace=args.bnode_namespace,
                      bnode_prefix=args.bnode_prefix)
    except (FatalInputError, OSError) as e:
        print("rdfaify: {0}".format(e), file=sys.stderr)
        return 1

    if args.screen:
        return 0

    if args.warnings:
        for message in collector.warnings:
            print("warning: {0}".format(message), file=sys.stderr)

    logger.debug("exporting %d statements", len(collector.graph))

    # Write the graph to the given file (or stdout)
    data = collector.graph.serialize(format=args.output_type)
    if args.outfile:
        with open(args.outfile, 'w') as f:
            f.write(data)
    else:
        print(data)

    return 0


if __name__ == "__main__":
    sys.exit(main())
