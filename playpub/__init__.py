"""Upload Android App Bundles to Google Play and drive the release pipeline."""

__version__ = "0.1.0"
