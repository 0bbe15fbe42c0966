"""Token quota management service."""
