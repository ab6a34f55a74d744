"""Magia Interna: sales, stock and customer management for a small clothing shop."""
