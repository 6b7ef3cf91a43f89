"""Runtime services (telemetry) shared across smart_fold."""
