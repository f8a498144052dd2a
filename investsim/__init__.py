"""investsim - Investment & Financing Simulation Engine

Pure, deterministic computation behind the business and credit simulators:
item splits, loan installments, indexed projections and viability metrics.

Modules:
    - core: Exceptions, logging and settings
    - domain.models: Pydantic value objects (items, credit lines, results)
    - domain.calculator: Aggregation, amortization, indexation, analysis, sensitivity
    - application.services: End-to-end simulation pipeline
"""

__version__ = "1.4.0"
