"""pubsentinel: dependency health reports for pubspec.yaml manifests."""

__version__ = "0.1.0"
