"""Individual health checks run by the monitor."""
