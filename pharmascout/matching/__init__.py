"""Registry-to-supplier matching with vendor contact resolution."""

from .supplier_matcher import SupplierMatcher, clean_wholesaler_name, matches_substance

__all__ = ['SupplierMatcher', 'clean_wholesaler_name', 'matches_substance']
