"""Twigga command-line interface."""
