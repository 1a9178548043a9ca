"""
Connection Module

This module implements the Connection class and the ConnectionType enumeration.

Classes:
    ConnectionType: Enumeration for connection types (FORWARD, SELF, RECURRENT)
    Connection:     A weighted, optionally gated, directed edge between two nodes
"""

from enum import Enum

class ConnectionType(Enum):
    """
    How a connection relates to the order in which nodes are processed.

    FORWARD:   the source is processed before the target
    SELF:      source and target are the same node
    RECURRENT: the source is processed after the target, so the target reads
               the source value of the previous forward pass
    """
    FORWARD   = "F"
    SELF      = "S"
    RECURRENT = "R"

class Connection:
    """
    A directed, weighted edge between two nodes of a Network.

    Endpoints (and the optional gater) are stored as positions in the
    network's node sequence; the Network patches them in place whenever a node
    is inserted or removed. The gater is a node whose current 'value' scales
    the weight of the connection during a forward pass.

    Public Attributes:
        from_index:  Position of the source node
        to_index:    Position of the target node
        weight:      Weight of the connection
        gater_index: Position of the gating node (None if not gated)

    Public Properties:
        type:  FORWARD, SELF or RECURRENT, derived from the current positions
        gated: Whether the connection has a gater
        key:   Structural identity (from_index, to_index, gater_index)
    """

    def __init__(self,
                 from_index : int,
                 to_index   : int,
                 weight     : float = 0.0,
                 gater_index: int | None = None):
        self.from_index : int        = from_index
        self.to_index   : int        = to_index
        self.weight     : float      = weight
        self.gater_index: int | None = gater_index

    @property
    def type(self) -> ConnectionType:
        # Node insertions and removals keep the relative order of the
        # surviving nodes, so this always matches the type at creation time.
        if self.to_index > self.from_index:
            return ConnectionType.FORWARD
        if self.to_index == self.from_index:
            return ConnectionType.SELF
        return ConnectionType.RECURRENT

    @property
    def gated(self) -> bool:
        return self.gater_index is not None

    @property
    def key(self) -> tuple[int, int, int | None]:
        return (self.from_index, self.to_index, self.gater_index)

    def __repr__(self):
        return (f"Connection(from_index={self.from_index}, to_index={self.to_index}, "
                f"weight={self.weight:+.6f}, gater_index={self.gater_index})")

    def __str__(self):
        gate = f",g{self.gater_index:02d}" if self.gated else ""
        return f"[{self.type.value},{self.from_index:02d}=>{self.to_index:02d},{self.weight:+.02f}{gate}]"
