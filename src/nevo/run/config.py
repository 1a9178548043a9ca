import configparser
import os
from nevo.activations import ActivationFunction, parse_activation_list
from nevo.genotype    import MUTATION_NAMES
from nevo.selection   import SelectionFunction, parse_selection

TIE_POLICIES         = ("random", "smaller", "larger")
OUT_OF_RANGE_ACTIONS = ("drop", "raise")
FITNESS_CRITERIA     = ("max", "mean")

class Config:
    """
    Parameters shared by all networks (and the pool) of one evolutionary run.

    A Config is an immutable value: it is fully built by the constructor, from
    built-in defaults, then an optional INI file, then keyword overrides; any
    later attempt to set an attribute raises AttributeError. Two Configs with
    the same parameters compare equal, which is what crossover checks.

    Mutation rates:
        Each of the eleven '<name>_rate' parameters encodes both the number
        of tries and the probability of each try. The integer part, increased
        by one, is the number of tries; the fractional part is the probability
        that the mutation actually happens on each try. An integral rate means
        that many tries, each one certain:
            add_node_rate          = 1.05   # 2 tries, 5% chance each
            remove_connection_rate = 0.10   # 1 try, 10% chance
            weight_rate            = 2.0    # 2 tries, always applied
            activation_rate        = 0.0    # never
    """

    _DEFAULTS = {
        # [NETWORK]
        "inputs" : 2,
        "outputs": 1,

        # [ACTIVATIONS]
        "input_activations" : "identity",
        "output_activations": "identity",
        "hidden_activations": "sigmoid, tanh, step, sign, linear, sinus, relu, selu, silu",

        # [MUTATION]
        "add_node_rate"                : 1.05,
        "add_forward_connection_rate"  : 5.20,
        "add_self_connection_rate"     : 1.025,
        "add_recurrent_connection_rate": 2.01,
        "add_gate_rate"                : 2.15,
        "weight_rate"                  : 5.75,
        "bias_rate"                    : 2.50,
        "activation_rate"              : 0.01,
        "remove_node_rate"             : 0.025,
        "remove_connection_rate"       : 0.10,
        "remove_gate_rate"             : 1.10,

        # [CROSSOVER]
        "crossover_tie_policy" : "random",
        "crossover_out_of_range": "drop",

        # [POOL]
        "population_size"   : 400,
        "batch_size"        : None,
        "elitism"           : 5,
        "crossover_chance"  : 0.75,
        "nodes_growth"      : 0.0,
        "connections_growth": 0.0,
        "gates_growth"      : 0.0,
        "selection"         : "power(5.0)",

        # [TERMINATION]
        "max_number_generations": 100,
        "fitness_threshold"     : None,
        "fitness_criterion"     : "max",
    }

    # (section, key in file, attribute, type)
    _INI_LAYOUT = [
        ("NETWORK", "inputs" , "inputs" , int),
        ("NETWORK", "outputs", "outputs", int),

        ("ACTIVATIONS", "input_activations" , "input_activations" , str),
        ("ACTIVATIONS", "output_activations", "output_activations", str),
        ("ACTIVATIONS", "hidden_activations", "hidden_activations", str),

        *[("MUTATION", name, f"{name}_rate", float) for name in MUTATION_NAMES],

        ("CROSSOVER", "tie_policy"  , "crossover_tie_policy"  , str),
        ("CROSSOVER", "out_of_range", "crossover_out_of_range", str),

        ("POOL", "population_size"   , "population_size"   , int),
        ("POOL", "batch_size"        , "batch_size"        , int),
        ("POOL", "elitism"           , "elitism"           , int),
        ("POOL", "crossover_chance"  , "crossover_chance"  , float),
        ("POOL", "nodes_growth"      , "nodes_growth"      , float),
        ("POOL", "connections_growth", "connections_growth", float),
        ("POOL", "gates_growth"      , "gates_growth"      , float),
        ("POOL", "selection"         , "selection"         , str),

        ("TERMINATION", "max_number_generations", "max_number_generations", int),
        ("TERMINATION", "fitness_threshold"     , "fitness_threshold"     , float),
        ("TERMINATION", "fitness_criterion"     , "fitness_criterion"     , str),
    ]

    def __init__(self, config_file: str | None = None, **overrides):
        """
        Initialize Config from defaults, an optional INI file and keyword overrides.

        Activation pools may be given as lists of ActivationFunction objects or as
        comma-separated descriptions such as "identity, sigmoid(2.0)"; the
        selection strategy as a SelectionFunction or a description such as
        "tournament(5, 0.5)".

        Parameters:
            config_file: Path to the INI configuration file (optional).
            overrides:   Parameter values taking precedence over the file.

        Raises:
            FileNotFoundError: if 'config_file' does not exist
            TypeError:         if an override names an unknown parameter
            ValueError:        if a parameter value is invalid
        """
        params = dict(self._DEFAULTS)

        if config_file is not None:
            params.update(self._read_file(config_file))

        unknown = set(overrides) - set(self._DEFAULTS)
        if unknown:
            raise TypeError(f"Unknown configuration parameter(s): {', '.join(sorted(unknown))}")
        params.update(overrides)

        for name, value in params.items():
            if name.endswith("_activations"):
                value = self._parse_activation_options(value)
            elif name == "selection":
                value = parse_selection(value) if isinstance(value, str) else value
            object.__setattr__(self, name, value)

        self._validate()
        object.__setattr__(self, "_frozen", True)

    @classmethod
    def _read_file(cls, config_file: str) -> dict:
        """
        Read the parameters present in an INI file; missing ones keep their defaults.
        """
        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing values
        _MISSING = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                return _MISSING

        params = {}
        for section, key, attribute, value_type in cls._INI_LAYOUT:
            value = get_value(section, key, value_type)
            if value is not _MISSING:
                params[attribute] = value
        return params

    @staticmethod
    def _parse_activation_options(raw_options) -> tuple[ActivationFunction, ...]:
        """
        Parse an activation pool from a string or a sequence of activations.
        """
        if isinstance(raw_options, str):
            return tuple(parse_activation_list(raw_options))
        return tuple(raw_options)

    def _validate(self) -> None:
        if self.inputs < 1 or self.outputs < 1:
            raise ValueError("A network needs at least one input and one output node")

        for pool_name in ("input_activations", "output_activations", "hidden_activations"):
            pool = getattr(self, pool_name)
            if not pool:
                raise ValueError(f"'{pool_name}' must contain at least one activation function")
            for activation in pool:
                if not isinstance(activation, ActivationFunction):
                    raise ValueError(f"'{pool_name}' contains {activation!r}, which is not an ActivationFunction")

        for name in MUTATION_NAMES:
            if getattr(self, f"{name}_rate") < 0:
                raise ValueError(f"Mutation rate '{name}_rate' must not be negative")

        if self.crossover_tie_policy not in TIE_POLICIES:
            raise ValueError(f"Invalid crossover tie policy '{self.crossover_tie_policy}'")
        if self.crossover_out_of_range not in OUT_OF_RANGE_ACTIONS:
            raise ValueError(f"Invalid crossover out-of-range action '{self.crossover_out_of_range}'")
        if self.fitness_criterion not in FITNESS_CRITERIA:
            raise ValueError(f"Invalid fitness criterion '{self.fitness_criterion}'")
        if not isinstance(self.selection, SelectionFunction):
            raise ValueError(f"Invalid selection strategy {self.selection!r}")

    def mutation_rate(self, name: str) -> float:
        """The rate of the mutation operator called 'name' (see MUTATION_NAMES)."""
        return getattr(self, f"{name}_rate")

    def activation_pool(self, role) -> tuple[ActivationFunction, ...]:
        """The candidate activations for nodes of the given NodeRole."""
        return getattr(self, f"{role.name.lower()}_activations")

    def _key(self) -> tuple:
        # The selection strategy is a pool default, not part of the network genotype
        # (and may carry a cache), so it does not take part in equality.
        return tuple(getattr(self, name) for name in self._DEFAULTS if name != "selection")

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __setattr__(self, name, value):
        """
        Configurations are immutable once built.
        """
        if getattr(self, "_frozen", False):
            raise AttributeError(f"Config is immutable, cannot set '{name}'")
        super().__setattr__(name, value)

    def __repr__(self):
        return f"Config(inputs={self.inputs}, outputs={self.outputs})"
