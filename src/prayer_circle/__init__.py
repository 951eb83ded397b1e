"""Prayer Circle - Topluluk dua istekleri servisi."""

__version__ = "0.1.0"
