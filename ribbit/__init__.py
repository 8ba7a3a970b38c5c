"""Ribbit core: settings, local database and the remote authorization client."""
