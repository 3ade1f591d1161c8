"""Placement algorithms."""

from archmap.place.sa import place
