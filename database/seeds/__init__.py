"""
Seed data orchestration module.

Provides seed_all() to reset the collections and generate the synthetic
dataset in dependency order. Run standalone: python -m database.seeds
"""

from database.seeds.orchestrator import main, run_seed, seed_all

__all__ = ["main", "run_seed", "seed_all"]
