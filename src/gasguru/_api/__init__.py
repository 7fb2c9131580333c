"""Per-collection adapters between the document store and the local caches."""
