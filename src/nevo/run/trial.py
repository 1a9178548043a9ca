"""
Trial Module

This module defines the Trial class, which runs the evolutionary loop on a
Pool until a solution is found or the maximum number of generations is
reached.

A trial represents one independent run: a fresh pool is created, then the
population is evaluated and bred generation after generation.
"""

import logging
import random
from typing import TYPE_CHECKING

from nevo.pool       import Environment, Pool
from nevo.run.config import Config
from nevo.selection  import SelectionFunction
if TYPE_CHECKING:
    from nevo.genotype import Network

logger = logging.getLogger(__name__)

class Trial:
    """
    One independent evolutionary run.

    Subclasses can override:
    - _report_progress(): Report after each evaluated generation (default: log a line)
    - _final_report():    Report at the end of the trial (default: log the best network)
    - _terminate():       Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed:  False if the fitness threshold was reached
        best:    The highest scoring network seen so far (the network itself, not a copy)
        history: One statistics dictionary (see Pool.statistics) per evaluated generation

    Public Methods:
        run(): Execute a complete trial
    """

    def __init__(self,
                 config         : Config,
                 environment    : Environment,
                 select         : SelectionFunction | None = None,
                 rng            : random.Random | None = None,
                 suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            environment:     Assigns fitness to the networks
            select:          Selection strategy (default: the one in the config)
            rng:             Random number generator shared by the pool and its networks
            suppress_output: If True, suppress progress and final reports
                             (useful when running many trials)
        """
        self._config         : Config            = config
        self._environment    : Environment       = environment
        self._select         : SelectionFunction = select
        self._rng                                = rng
        self._suppress_output: bool              = suppress_output

        self._pool   : Pool | None      = None
        self.best    : 'Network | None' = None
        self.history : list[dict]       = []
        self.failed  : bool             = True

    @property
    def pool(self) -> Pool | None:
        return self._pool

    @property
    def generation(self) -> int:
        return self._pool.generation if self._pool is not None else 0

    def run(self) -> 'Network':
        """
        Run the trial and return the best network found.

        Resets the trial state and runs the evolutionary algorithm
        until the terminate condition is met.
        """
        self._reset()

        # Create the initial population
        self._pool = Pool(self._config, select=self._select, rng=self._rng)

        while True:
            # Evaluate the fitness of each network in the current generation
            self._pool.evaluate_fitness(self._environment)
            self._record()

            if not self._suppress_output:
                self._report_progress()

            if self._terminate():
                break

            # The members of the pool mate and create the next generation
            self._pool.breed_new_generation()

        if not self._suppress_output:
            self._final_report()

        return self.best

    def _reset(self):
        """
        Reset the trial state before starting a new run.
        """
        self._pool   = None
        self.best    = None
        self.history = []
        self.failed  = True

    def _record(self):
        self.history.append(self._pool.statistics())

        fittest = self._pool.fittest()
        if self.best is None or fittest.score >= self.best.score:
            self.best = fittest

    def _report_progress(self):
        """
        Report trial progress after each evaluated generation.
        """
        stats = self.history[-1]
        logger.info("generation %3d: max fitness %.4f, mean fitness %.4f, min fitness %.4f",
                    self.generation, stats["max"], stats["mean"], stats["min"])

    def _final_report(self):
        """
        Produce final report at the end of the trial.
        """
        outcome = "failed" if self.failed else "succeeded"
        logger.info("trial %s after %d generation(s); best fitness %.4f",
                    outcome, self.generation, self.best.fitness)
        logger.info("best network:\n%s", self.best)

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if a given measure of
        population fitness has reached a given threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self.generation >= self._config.max_number_generations

        # Compare a measure of population fitness (max, mean) against a threshold
        if self._config.fitness_threshold is not None:
            overall_fitness = self.history[-1][self._config.fitness_criterion]
            success = overall_fitness >= self._config.fitness_threshold
            if success:
                self.failed = False
            terminate = terminate or success

        return terminate
