"""ClientQuery: a client for the SharePoint ProcessQuery object protocol."""

__version__ = "0.1.0"
