"""Trust score aggregation: factor model, weights and the aggregator."""
