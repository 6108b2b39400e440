"""tiergraph - consistency checking and tiered ranking for ordering graphs."""

__version__ = "1.0.0"
