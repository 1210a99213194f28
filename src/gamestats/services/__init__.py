"""Service layer: parsing, collections, export, and checks."""
