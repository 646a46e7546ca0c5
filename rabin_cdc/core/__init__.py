"""
Core components: chunk schema, configuration, the rolling fingerprint engine,
the identity hash and chunking comparison.
"""
