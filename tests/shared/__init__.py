"""Shared test helpers: a fake OpenKM server and an in-memory PDF builder."""
