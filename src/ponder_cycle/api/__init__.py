"""HTTP surface of the Ponder cycle service."""
