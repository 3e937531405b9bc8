"""Look up De Lijn stops, SNCB/NMBS stations and SNCB live boards from the command line."""

__version__ = "0.0.0"