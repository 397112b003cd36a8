"""Application layer around the signal engine.

Wires price-history sources and signal storage to pulse_core:
- config: PULSE_* settings
- sources: price history protocol, CSV and fallback sources
- repository: signal storage protocol and in-memory backend
- runner: nightly refresh over many tickers
"""
