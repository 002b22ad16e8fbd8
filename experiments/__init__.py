"""
Experiments Module

Experiment configuration and CLI.

This module provides:
- YAML-based configuration loading
- CLI for running experiments
- Seed management for reproducibility
- Artifact storage (config snapshot, metrics, best program)
- Graceful interruption between generations
"""

__version__ = "0.1.0"
