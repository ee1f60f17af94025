"""Rate ingestion: providers, throttling, fallback and delta enrichment."""
