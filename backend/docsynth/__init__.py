"""Synthesize word-processing documents from generated markup and store them remotely."""
