"""Runtime configuration for the trust scoring service."""
