"""Council meeting management and governance service."""
