"""
Scenarios package for the timestamp harness.

Re-exports the abstract interfaces and the concrete scenario classes so
downstream code can import from `cqlstamp.scenarios` directly.
"""

from cqlstamp.scenarios.abstract import AbstractScenario, Scenario, ScenarioResult
from cqlstamp.scenarios.batch import (
    BatchLoggedUsingTimestampScenario,
    BatchLoggedWithTimestampScenario,
    BatchUnloggedUsingTimestampScenario,
    BatchUnloggedWithTimestampScenario,
)
from cqlstamp.scenarios.single import QueryUsingTimestampScenario, QueryWithTimestampScenario

__all__ = [
    # Abstracts
    "AbstractScenario",
    "Scenario",
    "ScenarioResult",
    # Concrete scenarios
    "BatchLoggedUsingTimestampScenario",
    "BatchLoggedWithTimestampScenario",
    "BatchUnloggedUsingTimestampScenario",
    "BatchUnloggedWithTimestampScenario",
    "QueryUsingTimestampScenario",
    "QueryWithTimestampScenario",
]
