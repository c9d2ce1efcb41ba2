"""
Prefect flows for the envelope pipeline.

Flows:
- envelope: fetch GBIF occurrences (cached), load WorldClim layers,
  rasterize + join + summarize, write results under ``derived/``

Usage (local):
    python -m climate_envelope.flows.envelope "Eucalyptus saligna"

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m climate_envelope.flows.envelope "Eucalyptus saligna"
"""
