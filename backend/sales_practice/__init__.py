"""Sales Practice - rehearse sales conversations against a simulated customer."""

__version__ = "1.0.0"
