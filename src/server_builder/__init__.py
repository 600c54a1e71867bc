"""
server_builder

This package provisions cloud servers and their drives through a line oriented
command line client.

We keep modules small and well separated:
core contains entities, errors, the image catalogue and the line codec
execution contains command executors (subprocess, http, in memory)
factories turn entities into commands and parse responses back
builder contains the orchestrator, build session and imaging poller
manifest loads server definitions from json
agent contains the runner and the mock control plane endpoint
"""
