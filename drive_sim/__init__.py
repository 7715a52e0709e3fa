"""Holonomic drive simulator: kinematic motion core and tick loop."""

__version__ = "0.1.0"
