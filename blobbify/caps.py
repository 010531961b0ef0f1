# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Type descriptions (Caps) for assembled blobs using RDF.

A Caps node describes what an assembled blob holds: its MIME type, its byte
size and digest, how its line endings were treated and, once it has been
registered, the object URL that refers to it. An unregistered blob is a
blank node.
"""

from __future__ import annotations

import json
from typing import Any

from rdflib import BNode, Graph, Literal, Namespace, URIRef
from rdflib.namespace import DCTERMS, RDF

SCHEMA = Namespace("https://schema.org/")

# Project Namespaces
BB = Namespace("urn:blobbify:caps#")
PARAM = Namespace("urn:blobbify:param:")

OCTET_STREAM = "application/octet-stream"

_PREDICATES = {
    "size": SCHEMA["contentSize"],
    "sha256": SCHEMA["sha256"],
}


class Caps:
    """Describes an assembled blob.

    Internally backed by an rdflib.Graph.
    """

    def __init__(self, media_type: str | None = None, params: dict[str, Any] | None = None):
        self._graph = Graph()
        self._graph.bind("bb", BB)
        self._graph.bind("param", PARAM)
        self._graph.bind("dcterms", DCTERMS)
        self._graph.bind("schema", SCHEMA)

        params = params or {}

        uri = params.get("uri")
        self._node = URIRef(uri) if uri else BNode()
        self._graph.add((self._node, RDF.type, BB.Caps))

        if media_type:
            self._graph.add((self._node, DCTERMS.format, Literal(media_type)))

        for key, value in params.items():
            if key == "uri" or value is None:
                continue
            predicate = _PREDICATES.get(key, PARAM[key])
            self._graph.add((self._node, predicate, Literal(value)))

    @property
    def media_type(self) -> str | None:
        """Get the media type (dcterms:format)."""
        val = self._graph.value(self._node, DCTERMS.format)
        return str(val) if val else None

    @property
    def uri(self) -> str | None:
        """Object URL of the described blob, or None while unregistered."""
        return str(self._node) if isinstance(self._node, URIRef) else None

    @property
    def params(self) -> dict[str, Any]:
        """Rebuild a params dictionary from the graph."""
        p: dict[str, Any] = {}
        for key, predicate in _PREDICATES.items():
            val = self._graph.value(self._node, predicate)
            if val is not None:
                p[key] = val.value
        for _, predicate, obj in self._graph.triples((self._node, None, None)):
            if predicate.startswith(PARAM):
                p[str(predicate)[len(PARAM) :]] = obj.value
        if self.uri:
            p["uri"] = self.uri
        return p

    def __repr__(self) -> str:
        return f"Caps(media_type={self.media_type}, uri={self.uri})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Caps):
            return NotImplemented
        from rdflib.compare import to_isomorphic

        return to_isomorphic(self._graph) == to_isomorphic(other._graph)


def caps_to_turtle(caps: Caps) -> str:
    """Serialize caps to Turtle format."""
    return caps._graph.serialize(format="turtle")


def summarize_caps(caps: Caps) -> str:
    """Return a JSON summary of the caps."""
    info: dict[str, Any] = {"media_type": caps.media_type or OCTET_STREAM}
    info.update(caps.params)
    return json.dumps(info, indent=2)
