"""Command-line interface for Arachne."""
