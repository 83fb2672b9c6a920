"""
pharmascout - pharmaceutical registry extraction and vendor intelligence.

Subpackages:
    common - logging, configuration, CSV helpers, rate limiting
    models - pure data classes
    extraction - registry table parsing, normalization and extraction
    export - CSV export of registry records
    discovery - search source adapters and vendor aggregation
    intelligence - vendor classification and research
    matching - product-to-supplier matching
"""
