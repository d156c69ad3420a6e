"""End-to-end story generation programs."""
