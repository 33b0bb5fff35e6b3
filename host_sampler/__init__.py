"""Estimate which host a Linked Data Fragments dataset mostly references."""
