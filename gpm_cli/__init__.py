"""Command line front-end for gpm."""
