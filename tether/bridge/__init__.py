"""Bridge between expressions and the external constraint solver."""
