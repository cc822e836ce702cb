"""Crawler for the Unsyiah electronic thesis catalog."""
