"""demo-service: Traced HTTP demo service.

Serves a fixed greeting on ``/`` after fetching resources from a
downstream service, with the whole exchange exported as one trace.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
