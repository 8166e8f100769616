"""Core systems: input aggregation, camera modes and the simulation driver."""
