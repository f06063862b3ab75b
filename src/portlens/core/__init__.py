"""Port/process correlation and classification."""
