"""Runtime primitives: run context, event logging, process execution."""
