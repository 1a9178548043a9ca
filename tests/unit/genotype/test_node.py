"""
Unit tests for nevo.genotype.node module.
"""

import pytest

from nevo.activations       import Linear, Sigmoid
from nevo.genotype.node     import Node, NodeRole
from nevo.genotype.connection import Connection


class TestNodeInit:

    def test_defaults(self):
        node = Node(NodeRole.HIDDEN, Sigmoid())
        assert node.role == NodeRole.HIDDEN
        assert node.activation == Sigmoid()
        assert node.bias == 0.0
        assert node.state == 0.0
        assert node.value == 0.0
        assert node.self_connection is None
        assert node.incoming == []
        assert node.outgoing == []

    def test_connection_lists_not_shared(self):
        node1 = Node(NodeRole.HIDDEN, Sigmoid())
        node2 = Node(NodeRole.HIDDEN, Sigmoid())
        node1.incoming.append(Connection(0, 1))
        assert node2.incoming == []


class TestNodeCopy:

    def test_copy_keeps_parameters(self):
        node = Node(NodeRole.OUTPUT, Linear(2.0), bias=0.5)
        copy = node.copy()
        assert copy is not node
        assert copy.role == NodeRole.OUTPUT
        assert copy.activation == Linear(2.0)
        assert copy.bias == 0.5

    def test_copy_is_unconnected_with_zero_state(self):
        node = Node(NodeRole.HIDDEN, Sigmoid(), bias=0.1)
        node.state = 3.0
        node.value = 0.9
        node.incoming.append(Connection(0, 2))
        node.self_connection = Connection(2, 2)

        copy = node.copy()
        assert copy.state == 0.0
        assert copy.value == 0.0
        assert copy.incoming == []
        assert copy.self_connection is None


class TestNodeClear:

    def test_clear(self):
        node = Node(NodeRole.HIDDEN, Sigmoid(), bias=0.1)
        node.state = 3.0
        node.value = 0.9
        node.clear()
        assert node.state == 0.0
        assert node.value == 0.0
        assert node.bias == 0.1


class TestNodeStr:

    def test_input(self):
        assert str(Node(NodeRole.INPUT, Linear())) == "[I,LIN]"

    def test_hidden(self):
        assert str(Node(NodeRole.HIDDEN, Sigmoid(), bias=0.5)) == "[H,SIG,b=0.50]"

    @pytest.mark.parametrize("role", list(NodeRole))
    def test_repr(self, role):
        assert role.name in repr(Node(role, Linear()))
