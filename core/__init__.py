"""Orchestration of signal providers and the trust aggregator."""
