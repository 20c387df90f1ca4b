"""Command line for Fact Universe."""
