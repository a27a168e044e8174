"""Núcleo del libro electoral. / Election ledger core."""
