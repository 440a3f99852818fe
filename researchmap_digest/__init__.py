"""Digest of researchmap achievements for a single researcher."""
