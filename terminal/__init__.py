"""Console rendering and command dispatch for the Katana CLI."""
