"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from buildcost.calculations.cascade import compute_cost_groups
from buildcost.calculations.investment import aggregate
from buildcost.calculations.masses import compute_masses
from buildcost.scenarios import run_project
from tests.fixtures.test_inputs import (
    get_reference_building,
    get_reference_inputs,
    get_unfinanced_inputs,
)


@pytest.fixture
def building():
    """Reference building parameters."""
    return get_reference_building()


@pytest.fixture
def masses(building):
    """Masses of the reference building."""
    return compute_masses(building)


@pytest.fixture
def cascade(building, masses):
    """Cost cascade of the reference building."""
    return compute_cost_groups(building, masses)


@pytest.fixture
def reference_inputs():
    """Reference project inputs with financing."""
    return get_reference_inputs()


@pytest.fixture
def breakdown(reference_inputs):
    """Investment cost of the reference project."""
    inputs = reference_inputs
    masses = compute_masses(inputs.building)
    cascade = compute_cost_groups(inputs.building, masses)
    return aggregate(cascade, masses, inputs.land, inputs.investment)


@pytest.fixture
def project(reference_inputs):
    """Full project result for the reference inputs."""
    return run_project(reference_inputs)


@pytest.fixture
def unfinanced_project():
    """Project result with financing disabled and flat rent."""
    return run_project(get_unfinanced_inputs())
