from __future__ import annotations

import io
import sys

import rdflib

from rdfaify import buildArgumentParser, main

DOC = """<html xmlns:foaf="http://xmlns.com/foaf/0.1/">
    <head>
      <link rel="foaf:maker" href="me.html" />
    </head>
    <body xmlns:fark="/not/absolute">
      <p property="foaf:name">Dan</p>
    </body>
</html>
"""


def _write(tmp_path, text=DOC):
    path = tmp_path / "doc.xhtml"
    path.write_text(text)
    return str(path)


def test_argument_defaults():
    args = buildArgumentParser().parse_args(["doc.xhtml"])
    assert args.output_type == "n3"
    assert args.base_uri is None
    assert args.outfile is None
    assert not args.screen
    assert not args.html


def test_main_writes_graph(tmp_path):
    outfile = tmp_path / "out.nt"
    assert main([_write(tmp_path), "-b", "http://example.com/", "-t", "nt", "-o", str(outfile)]) == 0
    g = rdflib.Graph()
    g.parse(str(outfile), format="nt")
    assert (rdflib.URIRef("http://example.com/"),
            rdflib.URIRef("http://xmlns.com/foaf/0.1/maker"),
            rdflib.URIRef("http://example.com/me.html")) in g
    assert (rdflib.URIRef("http://example.com/"),
            rdflib.URIRef("http://xmlns.com/foaf/0.1/name"),
            rdflib.Literal("Dan")) in g


def test_main_screen(tmp_path, capsys):
    assert main([_write(tmp_path), "--screen", "-b", "http://example.com/"]) == 0
    out = capsys.readouterr().out
    assert '<http://example.com/> <http://xmlns.com/foaf/0.1/name> "Dan" .' in out
    assert "# Warning: namespaces must be absolute URIs: /not/absolute" in out


def test_main_prints_warnings(tmp_path, capsys):
    assert main([_write(tmp_path), "-w", "-t", "nt"]) == 0
    captured = capsys.readouterr()
    assert "warning: namespaces must be absolute URIs: /not/absolute" in captured.err
    assert "http://xmlns.com/foaf/0.1/name" in captured.out


def test_main_relative_base_uri_fails(tmp_path, capsys):
    assert main([_write(tmp_path), "-b", "relative/"]) == 1
    assert "base_uri must be an absolute URI" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.xhtml")]) == 1
    assert capsys.readouterr().err.startswith("rdfaify: ")


def test_main_reads_tag_soup_from_stdin(monkeypatch, capsys):
    soup = b'<html><body><p property="p">unclosed<br></p></body></html>'
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(soup)))
    assert main(["-", "--screen", "-b", "http://example.com/"]) == 0
    out = capsys.readouterr().out
    assert '<http://example.com/> <p> "unclosed' in out
    assert "# Warning" not in out


def test_main_bnode_namespace_and_prefix(tmp_path, capsys):
    doc = '<html><body><link rel="knows" href="http://example.com/bob"/></body></html>'
    assert main([_write(tmp_path, doc), "--screen", "-n", "tag:example,2020:b#", "-p", "n"]) == 0
    out = capsys.readouterr().out
    assert "# BNode Namespace: tag:example,2020:b#" in out
    assert "<tag:example,2020:b#n1> <knows> <http://example.com/bob> ." in out


def test_main_forced_html(tmp_path, capsys):
    doc = '<html><body><span property="p">v</span></body></html>'
    assert main([_write(tmp_path, doc), "--screen", "--html"]) == 0
    assert '<> <p> "v" .' in capsys.readouterr().out
