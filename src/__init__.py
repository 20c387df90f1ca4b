"""Fact Universe: adaptive arithmetic fact drills."""
