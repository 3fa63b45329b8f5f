"""Cinderella Bounty — tournament upset-picking game engine."""
