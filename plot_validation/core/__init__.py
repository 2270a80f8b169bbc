"""Core utilities and shared infrastructure.

- config: Validation configuration loading and range checks
- constants: Field names, WGS 84 bounds, step names, categories
- countries: ISO 3166-1 alpha-2 reference table
- exceptions: Custom exception hierarchy
- ingress: Raw GeoJSON payload normalisation
"""
