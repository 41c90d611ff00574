"""
Test suite for the vault reward engine.

Focus areas:
- Accounting scenarios and invariants
- Reducer purity and replay determinism
- Reward preview and reporting
- Event files, log decoding and fetching
- CLI
"""
