"""Tense prioritizer source packages."""
