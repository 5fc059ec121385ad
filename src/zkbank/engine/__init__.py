"""Engine: owns the ledger, store and metrics."""
