"""
form-cli: interactive RDF form filling with policy-driven submission.
"""

__version__ = "0.1.0"
