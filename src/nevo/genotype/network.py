"""
Network Module

This module implements the Network class, the genome evolved by nevo.

Classes:
    Network: Ordered nodes plus connections, with a forward pass and mutation operators
"""

import math
import random
from typing import Callable, Sequence, TYPE_CHECKING

from nevo.genotype.connection import Connection, ConnectionType
from nevo.genotype.errors     import NetworkInvariantError
from nevo.genotype.node       import Node, NodeRole

if TYPE_CHECKING:
    from nevo.run.config import Config

# Names of the mutation operators, in the order in which 'Network.mutate()' applies them.
# Each name maps to the 'mutate_<name>' method and to the '<name>_rate' config parameter.
MUTATION_NAMES = ("add_node",
                  "add_forward_connection",
                  "add_self_connection",
                  "add_recurrent_connection",
                  "add_gate",
                  "weight",
                  "bias",
                  "activation",
                  "remove_node",
                  "remove_connection",
                  "remove_gate")

class Network:
    """
    A neural network whose topology and parameters are evolved (the genome).

    The network owns an ordered sequence of nodes and a list of connections.
    The node sequence doubles as the genotype's positional encoding:
        - Input nodes:  [0, inputs)
        - Hidden nodes: [inputs, len(nodes) - outputs)
        - Output nodes: [len(nodes) - outputs, len(nodes))
    Connections refer to nodes by position; inserting or removing a node
    shifts the positions stored in every affected connection.

    A forward pass ('invoke') processes every node exactly once, in sequence
    order. A connection whose source comes after its target (a recurrent
    connection) therefore carries the value its source had at the end of the
    previous pass. Node states persist between passes until a reset is
    requested.

    A new network has only input and output nodes, with every input connected
    to every output.

    Public Attributes:
        nodes:       The ordered list of Node objects
        connections: The list of Connection objects
        score:       Fitness corrected by the pool's complexity penalty (used for ranking)
        reset:       Whether node states will be zeroed before the next forward pass

    Public Properties:
        config:            The Config this network was built from
        rng:               The random number generator used by mutations
        fitness:           Externally assigned fitness (setting it also sets 'score')
        input_nodes, hidden_nodes, output_nodes: Nodes by role
        hidden_count:      Number of hidden nodes
        gated_connections: Connections that have a gater

    Public Methods:
        invoke(inputs):  Forward pass
        mutate():        Apply every mutation operator according to the configured rates
        mutate_*():      The individual mutation operators
        clone():         Structural copy with fresh state
        validate():      Check the structural invariants
        request_reset(): Zero node states before the next forward pass
    """

    def __init__(self, config: 'Config', rng: random.Random | None = None):
        """
        Initialize a fully connected network with no hidden nodes.

        Parameters:
            config: Stores configuration parameters
            rng:    Random number generator (defaults to the 'random' module)
        """
        self._init_empty(config, rng)

        for _ in range(config.inputs):
            activation = self._rng.choice(config.input_activations)
            self.nodes.append(Node(NodeRole.INPUT, activation))

        for _ in range(config.outputs):
            activation = self._rng.choice(config.output_activations)
            self.nodes.append(Node(NodeRole.OUTPUT, activation))

        # Initial weights are drawn uniformly from [0, sqrt(2 * inputs))
        scale = config.inputs * math.sqrt(2.0 / config.inputs)
        for from_index in range(config.inputs):
            for to_index in range(config.inputs, config.inputs + config.outputs):
                self.add_connection(from_index, to_index, self._rng.random() * scale)

    def _init_empty(self, config: 'Config', rng: random.Random | None) -> None:
        self._config = config
        self._rng    = rng if rng is not None else random

        self.nodes      : list[Node]       = []
        self.connections: list[Connection] = []

        self._fitness: float = 0.0
        self.score   : float = 0.0
        self.reset   : bool  = False

    @classmethod
    def empty(cls, config: 'Config', rng: random.Random | None = None) -> 'Network':
        """
        Create a network without nodes or connections.

        The caller is responsible for appending nodes which satisfy the role
        partition (see 'validate()').
        """
        network = cls.__new__(cls)
        network._init_empty(config, rng)
        return network

    @property
    def config(self) -> 'Config':
        return self._config

    @property
    def rng(self):
        return self._rng

    @property
    def fitness(self) -> float:
        return self._fitness

    @fitness.setter
    def fitness(self, value: float) -> None:
        self._fitness = value
        self.score    = value

    @property
    def input_nodes(self) -> list[Node]:
        return self.nodes[:self._config.inputs]

    @property
    def output_nodes(self) -> list[Node]:
        return self.nodes[len(self.nodes) - self._config.outputs:]

    @property
    def hidden_nodes(self) -> list[Node]:
        return self.nodes[self._config.inputs:len(self.nodes) - self._config.outputs]

    @property
    def hidden_count(self) -> int:
        return len(self.nodes) - self._config.inputs - self._config.outputs

    @property
    def gated_connections(self) -> list[Connection]:
        return [conn for conn in self.connections if conn.gated]

    def __len__(self) -> int:
        return len(self.nodes)

    def request_reset(self) -> None:
        """
        Zero the state and value of every node before the next forward pass.
        """
        self.reset = True

    # ------------------------------------------------------------------
    # Forward pass

    def invoke(self, inputs: Sequence[float]) -> list[float]:
        """
        Process the given inputs and return the values of the output nodes.

        Parameters:
            inputs: one value for each input node

        Returns:
            one value for each output node

        Raises:
            ValueError: if the number of inputs does not match the configuration
        """
        if len(inputs) != self._config.inputs:
            raise ValueError(f"Expected {self._config.inputs} inputs, got {len(inputs)}")

        if self.reset:
            self.reset = False
            for node in self.nodes:
                node.clear()

        nodes        = self.nodes
        outputs      = [0.0] * self._config.outputs
        first_output = len(nodes) - self._config.outputs

        for index, node in enumerate(nodes):
            if node.role == NodeRole.INPUT:
                node.value = node.activation(float(inputs[index]))
                continue

            state = 0.0
            if node.self_connection is not None:
                state = node.self_connection.weight * node.state * self._gate_value(node.self_connection)
            state += node.bias

            for conn in node.incoming:
                state += conn.weight * nodes[conn.from_index].value * self._gate_value(conn)

            node.state = state
            node.value = node.activation(state)

            if node.role == NodeRole.OUTPUT:
                outputs[index - first_output] = node.value

        return outputs

    def _gate_value(self, conn: Connection) -> float:
        if conn.gater_index is None:
            return 1.0
        return self.nodes[conn.gater_index].value

    # ------------------------------------------------------------------
    # Structural edits

    def add_connection(self,
                       from_index : int,
                       to_index   : int,
                       weight     : float = 0.0,
                       gater_index: int | None = None) -> Connection:
        """
        Create a connection and register it with the network and its endpoints.

        A connection from a node to itself becomes that node's self connection;
        any other connection is added to the target's incoming and the source's
        outgoing lists.

        Raises:
            IndexError: if a position is outside the node sequence
            ValueError: if the target is an input node, or the two nodes are already connected
        """
        for index in (from_index, to_index) + (() if gater_index is None else (gater_index,)):
            if not 0 <= index < len(self.nodes):
                raise IndexError(f"Node position {index} out of range [0, {len(self.nodes)})")

        from_node = self.nodes[from_index]
        to_node   = self.nodes[to_index]
        if to_node.role == NodeRole.INPUT:
            raise ValueError(f"Cannot connect to input node {to_index}")

        conn = Connection(from_index, to_index, weight, gater_index)
        if from_index == to_index:
            if from_node.self_connection is not None:
                raise ValueError(f"Node {from_index} already has a self connection")
            from_node.self_connection = conn
        else:
            if self._are_connected(from_index, to_index):
                raise ValueError(f"Nodes {from_index} and {to_index} are already connected")
            to_node.incoming.append(conn)
            from_node.outgoing.append(conn)

        self.connections.append(conn)
        return conn

    def remove_connection(self, conn: Connection) -> None:
        """
        Remove a connection, exactly undoing its registration.

        Raises:
            ValueError: if the connection does not belong to this network
        """
        self._remove_by_identity(self.connections, conn)

        from_node = self.nodes[conn.from_index]
        to_node   = self.nodes[conn.to_index]
        if conn.from_index == conn.to_index:
            from_node.self_connection = None
        else:
            self._remove_by_identity(to_node.incoming, conn)
            self._remove_by_identity(from_node.outgoing, conn)

    @staticmethod
    def _remove_by_identity(items: list, item) -> None:
        for position, candidate in enumerate(items):
            if candidate is item:
                del items[position]
                return
        raise ValueError(f"{item!r} is not part of this network")

    def _are_connected(self, from_index: int, to_index: int) -> bool:
        if from_index == to_index:
            return self.nodes[from_index].self_connection is not None
        return any(conn.to_index == to_index for conn in self.nodes[from_index].outgoing)

    def add_hidden_node(self,
                        index     : int,
                        bias      : float = 0.0,
                        activation: Callable[[float], float] | None = None) -> int:
        """
        Insert an unconnected hidden node.

        The position is capped to the hidden range [inputs, len(nodes) - outputs],
        so the role partition is preserved. Connections referring to positions
        at or after the insertion point are shifted.

        Parameters:
            index:      Requested position of the new node
            bias:       Bias of the new node
            activation: Activation function (random pick from the hidden pool if None)

        Returns:
            The actual position of the new node
        """
        if activation is None:
            activation = self._rng.choice(self._config.hidden_activations)

        index = max(min(index, len(self.nodes) - self._config.outputs), self._config.inputs)
        self.nodes.insert(index, Node(NodeRole.HIDDEN, activation, bias))

        for conn in self.connections:
            if conn.from_index >= index:
                conn.from_index += 1
            if conn.to_index >= index:
                conn.to_index += 1
            if conn.gater_index is not None and conn.gater_index >= index:
                conn.gater_index += 1
        return index

    def remove_hidden_node(self, index: int) -> None:
        """
        Remove a hidden node together with every connection starting or ending
        at it; connections gated by it lose their gater.

        Raises:
            ValueError: if the node at 'index' is not a hidden node
            IndexError: if 'index' is outside the node sequence
        """
        node = self.nodes[index]
        if node.role != NodeRole.HIDDEN:
            raise ValueError(f"Cannot remove node {index}: only hidden nodes can be removed (node role is {node.role.name})")

        attached = node.incoming + node.outgoing
        if node.self_connection is not None:
            attached.append(node.self_connection)
        for conn in attached:
            self.remove_connection(conn)

        del self.nodes[index]

        for conn in self.connections:
            if conn.gater_index == index:
                conn.gater_index = None
            elif conn.gater_index is not None and conn.gater_index > index:
                conn.gater_index -= 1
            if conn.from_index > index:
                conn.from_index -= 1
            if conn.to_index > index:
                conn.to_index -= 1

    # ------------------------------------------------------------------
    # Mutation operators

    def _random_weight(self) -> float:
        # uniform in [-1, 1)
        return self._rng.random() * 2 - 1

    def mutate_add_node(self) -> None:
        """
        Split a random connection by inserting a new hidden node.

        The new node takes the position of the old target. The source gets
        connected to it and it gets connected to the old target, both with
        random weights; the gater of the split connection moves to one of the
        two new connections.
        """
        if not self.connections:
            return
        conn = self._rng.choice(self.connections)

        # 'conn' stays registered until the end, so its positions get shifted by the insertion
        new_index = self.add_hidden_node(conn.to_index, self._random_weight())
        conn1 = self.add_connection(conn.from_index, new_index, self._random_weight())
        conn2 = self.add_connection(new_index, conn.to_index, self._random_weight())

        if conn.gated:
            self._rng.choice((conn1, conn2)).gater_index = conn.gater_index

        self.remove_connection(conn)

    def mutate_add_forward_connection(self) -> None:
        """
        Add a connection between two unconnected nodes, the target coming after the source.
        """
        connected = self._connected_pairs()
        pairs = [(from_index, to_index)
                 for from_index in range(len(self.nodes))
                 for to_index in range(max(self._config.inputs, from_index + 1), len(self.nodes))
                 if (from_index, to_index) not in connected]
        if not pairs:
            return

        from_index, to_index = self._rng.choice(pairs)
        self.add_connection(from_index, to_index, self._random_weight())

    def mutate_add_self_connection(self) -> None:
        """
        Add a connection from a (non-input) node to itself, which lets the node
        remember its state between forward passes.
        """
        candidates = [index for index in range(self._config.inputs, len(self.nodes))
                      if self.nodes[index].self_connection is None]
        if not candidates:
            return

        index = self._rng.choice(candidates)
        self.add_connection(index, index, self._random_weight())

    def mutate_add_recurrent_connection(self) -> None:
        """
        Add a connection leading back from a non-input node to an earlier
        non-input node, which then reads the source value of the previous pass.
        """
        connected = self._connected_pairs()
        pairs = [(from_index, to_index)
                 for from_index in range(self._config.inputs, len(self.nodes))
                 for to_index in range(self._config.inputs, from_index)
                 if (from_index, to_index) not in connected]
        if not pairs:
            return

        from_index, to_index = self._rng.choice(pairs)
        self.add_connection(from_index, to_index, self._random_weight())

    def _connected_pairs(self) -> set[tuple[int, int]]:
        return {(conn.from_index, conn.to_index) for conn in self.connections}

    def mutate_add_gate(self) -> None:
        """
        Make a random node the gater of a random connection.
        """
        if not self.connections:
            return
        conn = self._rng.choice(self.connections)
        conn.gater_index = self._rng.randrange(len(self.nodes))

    def mutate_weight(self) -> None:
        """
        Change the weight of a random connection by a value in [-1, 1).
        """
        if not self.connections:
            return
        conn = self._rng.choice(self.connections)
        conn.weight += self._random_weight()

    def mutate_bias(self) -> None:
        """
        Change the bias of a random non-input node by a value in [-1, 1).
        """
        candidates = self.nodes[self._config.inputs:]
        if not candidates:
            return
        node = self._rng.choice(candidates)
        node.bias += self._random_weight()

    def mutate_activation(self) -> None:
        """
        Replace the activation of a random node with one from its role's pool.
        """
        if not self.nodes:
            return
        node = self._rng.choice(self.nodes)
        node.activation = self._rng.choice(self._config.activation_pool(node.role))

    def mutate_remove_node(self) -> None:
        """
        Remove a random hidden node.

        Every source of the node gets connected to every target of the node
        (unless already connected), and the gaters of the node's connections
        are handed over to these new connections, at most one per connection.
        """
        first_hidden = self._config.inputs
        end_hidden   = len(self.nodes) - self._config.outputs
        if end_hidden <= first_hidden:
            return

        index = self._rng.randrange(first_hidden, end_hidden)
        node  = self.nodes[index]

        gaters = [conn.gater_index for conn in node.incoming + node.outgoing if conn.gated]
        sources = [conn.from_index for conn in node.incoming]
        targets = [conn.to_index   for conn in node.outgoing]

        new_connections = []
        for from_index in sources:
            for to_index in targets:
                if not self._are_connected(from_index, to_index):
                    new_connections.append(self.add_connection(from_index, to_index, self._random_weight()))

        for gater_index in gaters:
            if not new_connections:
                break
            conn = self._rng.choice(new_connections)
            conn.gater_index = gater_index
            new_connections.remove(conn)

        # gaters pointing at the removed node are cleared here
        self.remove_hidden_node(index)

    def mutate_remove_connection(self) -> None:
        """
        Remove a random connection.

        Self and recurrent connections can always be removed. A forward
        connection is kept if it is the only forward connection into its
        target, or the only forward connection out of its source.
        """
        candidates = [conn for conn in self.connections if self._is_removable(conn)]
        if not candidates:
            return
        self.remove_connection(self._rng.choice(candidates))

    def _is_removable(self, conn: Connection) -> bool:
        if conn.type != ConnectionType.FORWARD:
            return True

        forward_in  = sum(1 for other in self.nodes[conn.to_index].incoming
                          if other.type == ConnectionType.FORWARD)
        forward_out = sum(1 for other in self.nodes[conn.from_index].outgoing
                          if other.type == ConnectionType.FORWARD)
        return forward_in > 1 and forward_out > 1

    def mutate_remove_gate(self) -> None:
        """
        Remove the gater of a random gated connection.
        """
        gated = self.gated_connections
        if not gated:
            return
        self._rng.choice(gated).gater_index = None

    def mutate(self) -> None:
        """
        Apply every mutation operator, in the order of MUTATION_NAMES, with the
        rates configured in the Config (see Config for the meaning of a rate).
        """
        for name in MUTATION_NAMES:
            self._perform_mutation(self._config.mutation_rate(name), getattr(self, f"mutate_{name}"))

    def _perform_mutation(self, rate: float, mutation: Callable[[], None]) -> None:
        tries = math.floor(rate)
        if tries < rate:
            chance = rate - tries
            tries += 1
        else:
            chance = 1.0

        for _ in range(tries):
            if self._rng.random() < chance:
                mutation()

    # ------------------------------------------------------------------

    def clone(self) -> 'Network':
        """
        Create a structural copy of this network.

        The copy shares the Config and the random number generator, has its own
        nodes and connections, zeroed node states and no fitness.
        """
        copy = Network.empty(self._config, self._rng)
        copy.nodes = [node.copy() for node in self.nodes]
        for conn in self.connections:
            copy.add_connection(conn.from_index, conn.to_index, conn.weight, conn.gater_index)
        return copy

    def validate(self) -> None:
        """
        Check the structural invariants of the network.

        Raises:
            NetworkInvariantError: if the node roles do not follow the positional
                                   partition, a connection refers to a missing
                                   node, or the connection registrations are
                                   inconsistent
        """
        num_nodes   = len(self.nodes)
        num_inputs  = self._config.inputs
        num_outputs = self._config.outputs

        if num_nodes < num_inputs + num_outputs:
            raise NetworkInvariantError(f"Network has {num_nodes} nodes, needs at least {num_inputs + num_outputs}")

        for index, node in enumerate(self.nodes):
            if index < num_inputs:
                expected = NodeRole.INPUT
            elif index >= num_nodes - num_outputs:
                expected = NodeRole.OUTPUT
            else:
                expected = NodeRole.HIDDEN
            if node.role != expected:
                raise NetworkInvariantError(f"Node {index} has role {node.role.name}, expected {expected.name}")

        pairs = set()
        for conn in self.connections:
            for index in (conn.from_index, conn.to_index, conn.gater_index):
                if index is not None and not 0 <= index < num_nodes:
                    raise NetworkInvariantError(f"{conn!r} refers to node {index}, but the network has {num_nodes} nodes")

            if (conn.from_index, conn.to_index) in pairs:
                raise NetworkInvariantError(f"Nodes {conn.from_index} and {conn.to_index} are connected twice")
            pairs.add((conn.from_index, conn.to_index))

            if conn.from_index == conn.to_index:
                registered = self.nodes[conn.from_index].self_connection is conn
            else:
                registered = any(c is conn for c in self.nodes[conn.to_index].incoming) and \
                             any(c is conn for c in self.nodes[conn.from_index].outgoing)
            if not registered:
                raise NetworkInvariantError(f"{conn!r} is not registered with its nodes")

        num_registered = sum(len(node.incoming) + (node.self_connection is not None) for node in self.nodes)
        if num_registered != len(self.connections):
            raise NetworkInvariantError("Nodes refer to connections which are not part of the network")

    def __str__(self):
        nodes_str = ''.join(str(node) for node in self.nodes)
        conns_str = ''.join(str(conn) for conn in self.connections)
        return f"Nodes: {nodes_str}\nConns: {conns_str}"
