"""Export of registry records to flat files."""

from .csv_exporter import REGISTRY_CSV_HEADERS, RegistryCSVExporter

__all__ = ['REGISTRY_CSV_HEADERS', 'RegistryCSVExporter']
