from .models import ARCHIVE_SUFFIX, HOSTING_SERVICES, TRUNK, HostingService, PackageDescriptor, hosting_service_for
from .parse import normalize_name, parse_package, parse_version, split_spec

__all__ = [
    "ARCHIVE_SUFFIX",
    "HOSTING_SERVICES",
    "HostingService",
    "PackageDescriptor",
    "TRUNK",
    "hosting_service_for",
    "normalize_name",
    "parse_package",
    "parse_version",
    "split_spec",
]
