"""Test package for the dual n-back engine.

The core tests exercise the sequence generator, evaluator and difficulty
controller in isolation; the headless simulations drive whole blocks and
days through the orchestrator with seeded random sources. Run ``pytest``
from the project root.
"""
