"""
XOR Problem Implementation for nevo

This module implements the classic XOR (exclusive OR) problem as a benchmark
for topology-evolving networks. The XOR problem demonstrates the necessity of
hidden nodes for solving non-linearly separable problems.

The XOR Problem:
    XOR is a two-input, one-output boolean function where the output is True
    only when the inputs differ:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.
    The trial succeeds when the fitness reaches the threshold of the configuration
    file (3.9).

Classes:
    XOREnvironment: Assigns XOR fitness to a batch of networks
    Trial_XOR:      Trial printing the XOR truth table of the best network

Usage:
    python examples/trial_XOR.py [config_file] [seed]
"""

import logging
import random
import sys
from pathlib import Path

from nevo.genotype import Network
from nevo.pool     import Environment
from nevo.run      import Config, Trial

XOR_INPUTS  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
XOR_OUTPUTS = [0.0, 1.0, 1.0, 0.0]

class XOREnvironment(Environment):
    """
    Tests every network of a batch on the four XOR cases.
    """

    def evaluate_fitness(self, batch):
        for network in batch:
            network.fitness = self.fitness(network)

    @staticmethod
    def fitness(network: Network) -> float:
        # start every evaluation from zeroed node states
        network.request_reset()

        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(XOR_INPUTS, XOR_OUTPUTS):
            output   = network.invoke(inputs)[0]
            fitness -= (output - expected_output) ** 2
        return fitness

class Trial_XOR(Trial):
    """
    Trial solving XOR; reports the truth table of the fittest network after
    every generation.
    """

    def __init__(self, config: Config, rng: random.Random | None = None, suppress_output: bool = False):
        super().__init__(config, XOREnvironment(), rng=rng, suppress_output=suppress_output)

    def _report_progress(self):
        """
        Print a report describing the current generation.
        """
        fittest = self.pool.fittest()
        stats   = self.history[-1]

        s  = f"===============\n"
        s += f"GENERATION {self.generation:04d}\n"
        s += f"population size = {len(self.pool)}\n"
        s += f"maximum fitness = {stats['max']:.4f}\n"
        s += f"mean fitness    = {stats['mean']:.4f}\n"
        s += f"hidden nodes    = {fittest.hidden_count}\n"
        s += f"connections     = {len(fittest.connections)}\n"
        s += '\n'
        s += "input         output   target  error\n"
        s += "------------------------------------\n"

        fittest.request_reset()
        for inputs, target in zip(XOR_INPUTS, XOR_OUTPUTS):
            output = fittest.invoke(inputs)[0]
            s += f"{inputs} -> {output:.4f}    {target}   {abs(output - target):.4f}\n"

        print(s)

    def _final_report(self):
        """
        Display the best network at the end of the trial.
        """
        outcome = "FAILED" if self.failed else "SUCCESS"
        print(f"[{outcome}] after {self.generation} generations, best fitness {self.best.fitness:.4f}")
        print(self.best)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config_file = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).parent / "config_xor.ini"
    seed        = int(sys.argv[2]) if len(sys.argv) > 2 else None

    trial = Trial_XOR(Config(str(config_file)), rng=random.Random(seed))
    trial.run()
