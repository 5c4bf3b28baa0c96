"""dispatch: serve GitHub release boot images to network-booting hardware."""

__version__ = "0.3.0"
