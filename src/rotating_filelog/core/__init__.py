"""Records, formatting, rotation, writers and dispatch."""
