"""weatherrelay — live weather fan-out service.

A client asks for fresh weather by city name; the server fetches it from
the upstream provider and pushes the result to every connected viewer.
"""

__version__ = "0.1.0"
