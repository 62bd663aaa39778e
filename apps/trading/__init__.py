"""Trading app package.

Secondary market for property tokens: tokenized properties, holdings,
limit orders and the read-only market depth and market-order estimates
shown next to the order form. Matching and settlement happen elsewhere.
"""
