"""Core publish and install machinery for ghbin."""
