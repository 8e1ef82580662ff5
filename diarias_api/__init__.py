"""Roster store service: per-user employee documents with snapshot pushes."""
