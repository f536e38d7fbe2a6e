"""Node identities and placement."""

from wsnsim.topology.builder import NodeRole, NodeSpec, Topology, build_topology

__all__ = ["NodeRole", "NodeSpec", "Topology", "build_topology"]
