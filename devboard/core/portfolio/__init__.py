"""Portfolio site generation pipeline."""
