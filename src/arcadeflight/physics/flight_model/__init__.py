"""Flight model data types and the arcade integrator."""
