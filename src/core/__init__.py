"""
Core domain models, curve math, contracts and the in-memory store.

Everything here is independent of transport (HTTP, push channels) and of
persistence: state lives in a TokenomicsStore for the lifetime of the process.
"""
