"""Residential building cost estimator and cashflow/returns simulator.

Pipeline (all stages are pure functions over frozen dataclasses):

    BuildingParameters -> compute_masses -> compute_cost_groups -> aggregate
        -> simulate (per strategy) -> solve_returns

The scenario composer in ``buildcost.scenarios`` runs the whole
pipeline for both exit strategies and any number of sensitivity cases.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
