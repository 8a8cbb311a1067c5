"""folioscope command line interface."""
