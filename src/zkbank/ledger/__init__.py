"""Transaction ledger: records, store and lifecycle state machine."""
