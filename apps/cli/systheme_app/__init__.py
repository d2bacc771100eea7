"""Command line front end for systheme."""
