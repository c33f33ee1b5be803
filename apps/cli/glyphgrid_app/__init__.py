"""Command line front end for glyphgrid."""
