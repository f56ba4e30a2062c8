"""Core configuration for FinFamily Sync."""
