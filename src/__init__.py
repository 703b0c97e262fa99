"""Top-level package for slir-contact-sim.

Project code lives under `src/`. The simulation engine, sinks and run
helpers live under `src.slir`; plotting lives under `src.visualization`.
"""

# Package marker; keep this module lightweight.
