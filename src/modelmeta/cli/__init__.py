"""Command line interface for describing models and generating DDL."""
