"""Monorepo helper: offer sub-projects of a monorepo as installable packages."""
