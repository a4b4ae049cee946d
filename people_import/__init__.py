"""Planning Center people export -> roster import pipeline."""

__version__ = "0.1.0"
