"""
Unit tests for nevo.genotype.connection module.
"""

from nevo.genotype.connection import Connection, ConnectionType


class TestConnectionInit:

    def test_defaults(self):
        conn = Connection(0, 2)
        assert conn.from_index == 0
        assert conn.to_index == 2
        assert conn.weight == 0.0
        assert conn.gater_index is None
        assert not conn.gated

    def test_gated(self):
        conn = Connection(0, 2, 0.5, gater_index=1)
        assert conn.gated
        assert conn.gater_index == 1


class TestConnectionType:

    def test_forward(self):
        assert Connection(0, 2).type == ConnectionType.FORWARD

    def test_self(self):
        assert Connection(2, 2).type == ConnectionType.SELF

    def test_recurrent(self):
        assert Connection(3, 2).type == ConnectionType.RECURRENT

    def test_type_follows_shifted_positions(self):
        """Shifting both endpoints by the same amount keeps the type."""
        conn = Connection(3, 2)
        conn.from_index += 1
        conn.to_index += 1
        assert conn.type == ConnectionType.RECURRENT


class TestConnectionKey:

    def test_key(self):
        assert Connection(0, 2, 0.5).key == (0, 2, None)
        assert Connection(0, 2, 0.5, 1).key == (0, 2, 1)

    def test_key_ignores_weight(self):
        assert Connection(0, 2, 0.5).key == Connection(0, 2, -0.5).key


class TestConnectionStr:

    def test_str(self):
        assert str(Connection(0, 2, 0.5)) == "[F,00=>02,+0.50]"

    def test_str_gated(self):
        assert str(Connection(0, 2, 0.5, 3)) == "[F,00=>02,+0.50,g03]"

    def test_str_recurrent(self):
        assert str(Connection(4, 2, -1.25)) == "[R,04=>02,-1.25]"
