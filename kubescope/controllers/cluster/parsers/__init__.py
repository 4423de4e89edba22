"""Parsers for cluster data."""

from kubescope.controllers.cluster.parsers.kind_parser import KindParser
from kubescope.controllers.cluster.parsers.node_parser import NodeParser

__all__ = ["KindParser", "NodeParser"]
