"""EUDR Plot Validation Engine.

Validates GeoJSON FeatureCollections of land parcels submitted as
deforestation-free origin evidence. Every plot is checked for
attribute completeness and geometric soundness, and the collection is
gated all-or-nothing before a Due Diligence Statement may proceed.
"""

__version__ = "0.1.0"
