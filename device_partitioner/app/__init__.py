"""Application layer: device workspace, conflict planning, merges and export."""
