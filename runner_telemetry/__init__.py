"""runner-telemetry: dashboard snapshots derived from CI-runner worker logs."""
