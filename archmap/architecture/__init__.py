"""The hierarchical architecture model which tasks are mapped onto."""

# Model
from archmap.architecture.model import \
    Direction, PortClass, Port, Link, Component, TopLevel

# Paths to items of the model
from archmap.architecture.paths import ComponentPath, PortPath, LinkPath

# Construction
from archmap.architecture.constructors import \
    add_port, add_child, add_link, build_mux, Offset, ConnectionRule, \
    connection_rule

from archmap.architecture.index import ArchitectureIndex
