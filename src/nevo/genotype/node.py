"""
Node Module.

This module implements the Node class and NodeRole enumeration.

Classes:
    NodeRole: Enumeration for node roles (INPUT, HIDDEN, OUTPUT)
    Node:     A single neuron of a Network
"""

from enum   import Enum
from typing import TYPE_CHECKING

from nevo.activations import ActivationFunction, activation_codes

if TYPE_CHECKING:
    from nevo.genotype.connection import Connection

class NodeRole(Enum):
    """
    Nodes come in three roles: input, hidden, output.
    """
    INPUT  = "I"
    HIDDEN = "H"
    OUTPUT = "O"

class Node:
    """
    A neuron in a Network.

    The role of a node must agree with its position in the network's node
    sequence (inputs first, outputs last, hidden nodes in between); it is the
    Network which keeps the two consistent.

    During a forward pass a non-input node computes:
        state = self_weight * previous_state * self_gate + bias + sum(weight * source_value * gate)
        value = activation(state)
    An input node only applies its activation to the raw input ('bias' and
    'state' are unused).

    Public Attributes:
        role:            INPUT, HIDDEN or OUTPUT
        bias:            Value added to the node's state on every forward pass
        activation:      The ActivationFunction computing 'value' from 'state'
        state:           Pre-activation accumulator (persists between passes)
        value:           Post-activation output, read by downstream connections
        self_connection: The connection from this node to itself (if any)
        incoming:        Connections ending at this node (except the self connection)
        outgoing:        Connections starting at this node (except the self connection)

    The connection lists do not own the connections; the Network does.
    """

    def __init__(self, role: NodeRole, activation: ActivationFunction, bias: float = 0.0):
        """
        Parameters:
            role:       Role of the node (INPUT, HIDDEN or OUTPUT)
            activation: Activation function of the node
            bias:       Bias of the node (ignored for INPUT nodes)
        """
        self.role      : NodeRole           = role
        self.activation: ActivationFunction = activation
        self.bias      : float              = bias

        self.state: float = 0.0
        self.value: float = 0.0

        self.self_connection: 'Connection | None' = None
        self.incoming       : list['Connection']  = []
        self.outgoing       : list['Connection']  = []

    def copy(self) -> 'Node':
        """
        Create an unconnected copy of this node, with zeroed state.
        """
        return Node(self.role, self.activation, self.bias)

    def clear(self) -> None:
        """Zero the transient state of the node."""
        self.state = 0.0
        self.value = 0.0

    def __repr__(self):
        return f"Node(role=NodeRole.{self.role.name}, activation={self.activation!r}, bias={self.bias})"

    def __str__(self):
        act_code = activation_codes.get(type(self.activation), "???")
        if self.role == NodeRole.INPUT:
            return f"[{self.role.value},{act_code}]"
        return f"[{self.role.value},{act_code},b={self.bias:.2f}]"
