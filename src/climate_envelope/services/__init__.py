"""
Shared service utilities.

- http.py - ``requests.Session`` with retry/backoff for GBIF and WorldClim
"""
