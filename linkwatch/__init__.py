"""linkwatch: scheduled broken-link scanning with emailed reports."""

__version__ = "0.1.0"
